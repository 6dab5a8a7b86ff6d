"""Schemas for content history entries and restore results."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class HistoryEntryOut(BaseModel):
    """One captured version, with the superseding actor's profile when known."""

    model_config = ConfigDict(from_attributes=True)

    entity_type: str
    record_id: uuid.UUID
    version: int
    title: str | None
    content_snapshot: dict[str, Any]
    meta_snapshot: dict[str, Any] | None
    status: str | None
    changed_by: uuid.UUID | None
    changed_by_email: str | None = None
    changed_by_name: str | None = None
    change_summary: str | None
    created_at: datetime


class RestoreResult(BaseModel):
    message: str
    restored_from_version: int
    version: int
    entity: dict[str, Any]
