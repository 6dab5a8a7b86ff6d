"""Schemas for the audit log read side."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    table_name: str
    record_id: uuid.UUID
    action: str
    user_id: uuid.UUID | None
    user_email: str | None
    old_values: dict[str, Any] | None
    new_values: dict[str, Any] | None
    changed_fields: list[str] | None
    ip_address: str | None
    user_agent: str | None
    created_at: datetime


class TableActivity(BaseModel):
    table_name: str
    total_operations: int
    inserts: int
    updates: int
    deletes: int
    unique_users: int
    last_modified: datetime | None


class UserActivity(BaseModel):
    user_id: uuid.UUID | None
    user_email: str | None
    total_actions: int
    inserts: int
    updates: int
    deletes: int
    last_activity: datetime | None
