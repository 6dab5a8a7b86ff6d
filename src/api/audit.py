"""Audit log API — read-only views over the change trail."""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import require_actor
from src.audit.queries import (
    get_audit_trail,
    recent_activity,
    table_activity_summary,
    user_activity_summary,
)
from src.db.engine import get_session
from src.schemas.actor import Actor
from src.schemas.audit import AuditLogOut, TableActivity, UserActivity
from src.schemas.history import HistoryEntryOut
from src.versioning.history import history_recorder

router = APIRouter(prefix="/api/audit", tags=["audit"])


@router.get("/recent", response_model=list[AuditLogOut])
async def recent(
    days: int = Query(7, ge=1, le=365),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[AuditLogOut]:
    entries = await recent_activity(db, days=days, limit=limit)
    return [AuditLogOut.model_validate(e) for e in entries]


@router.get("/tables", response_model=list[TableActivity])
async def tables(
    days: int = Query(30, ge=1, le=365),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[TableActivity]:
    return await table_activity_summary(db, days=days)


@router.get("/users", response_model=list[UserActivity])
async def users(
    days: int = Query(30, ge=1, le=365),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[UserActivity]:
    return await user_activity_summary(db, days=days)


@router.get("/content-changes", response_model=list[HistoryEntryOut])
async def content_changes(
    days: int = Query(7, ge=1, le=365),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[HistoryEntryOut]:
    """Recently superseded page and post versions."""
    return await history_recorder.recent_changes(db, days=days, limit=limit)


@router.get("/history/{entity_type}/{record_id}", response_model=list[HistoryEntryOut])
async def record_history(
    entity_type: str,
    record_id: uuid.UUID,
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[HistoryEntryOut]:
    """Captured versions of a page or post by id; still available after deletion."""
    return await history_recorder.get_history(db, entity_type, record_id, limit=limit)


@router.get("/{table_name}/{record_id}", response_model=list[AuditLogOut])
async def trail(
    table_name: str,
    record_id: uuid.UUID,
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[AuditLogOut]:
    """Full change trail of one row, most recent first."""
    entries = await get_audit_trail(db, table_name, record_id, limit=limit)
    return [AuditLogOut.model_validate(e) for e in entries]
