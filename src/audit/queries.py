"""Read-side queries over the audit log.

Shared by the audit API router and operational tooling. None of these write.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import ValidationFailure
from src.models.audit import AuditLog
from src.models.enums import AuditAction
from src.schemas.audit import TableActivity, UserActivity


def _since(days: int) -> datetime:
    if days < 1:
        raise ValidationFailure("days must be a positive integer", field="days")
    return datetime.now(UTC) - timedelta(days=days)


def _action_count(action: AuditAction):
    return func.sum(case((AuditLog.action == action.value, 1), else_=0))


async def get_audit_trail(
    db: AsyncSession,
    table_name: str,
    record_id: uuid.UUID,
    limit: int = 50,
) -> list[AuditLog]:
    """Audit entries for one row, most recent first."""
    if limit < 1:
        raise ValidationFailure("limit must be a positive integer", field="limit")
    result = await db.execute(
        select(AuditLog)
        .where(AuditLog.table_name == table_name, AuditLog.record_id == record_id)
        .order_by(AuditLog.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def recent_activity(db: AsyncSession, days: int = 7, limit: int = 100) -> list[AuditLog]:
    """All audit entries in the last ``days`` days, most recent first."""
    since = _since(days)
    result = await db.execute(
        select(AuditLog)
        .where(AuditLog.created_at >= since)
        .order_by(AuditLog.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def table_activity_summary(db: AsyncSession, days: int = 30) -> list[TableActivity]:
    """Per-table operation counts for the last ``days`` days, busiest first."""
    since = _since(days)
    total = func.count(AuditLog.id)
    result = await db.execute(
        select(
            AuditLog.table_name,
            total.label("total_operations"),
            _action_count(AuditAction.INSERT).label("inserts"),
            _action_count(AuditAction.UPDATE).label("updates"),
            _action_count(AuditAction.DELETE).label("deletes"),
            func.count(func.distinct(AuditLog.user_id)).label("unique_users"),
            func.max(AuditLog.created_at).label("last_modified"),
        )
        .where(AuditLog.created_at >= since)
        .group_by(AuditLog.table_name)
        .order_by(total.desc(), AuditLog.table_name)
    )
    return [
        TableActivity(
            table_name=row.table_name,
            total_operations=row.total_operations,
            inserts=row.inserts or 0,
            updates=row.updates or 0,
            deletes=row.deletes or 0,
            unique_users=row.unique_users,
            last_modified=row.last_modified,
        )
        for row in result.all()
    ]


async def user_activity_summary(db: AsyncSession, days: int = 30) -> list[UserActivity]:
    """Per-actor operation counts for the last ``days`` days, most active first."""
    since = _since(days)
    total = func.count(AuditLog.id)
    result = await db.execute(
        select(
            AuditLog.user_id,
            func.max(AuditLog.user_email).label("user_email"),
            total.label("total_actions"),
            _action_count(AuditAction.INSERT).label("inserts"),
            _action_count(AuditAction.UPDATE).label("updates"),
            _action_count(AuditAction.DELETE).label("deletes"),
            func.max(AuditLog.created_at).label("last_activity"),
        )
        .where(AuditLog.created_at >= since, AuditLog.user_id.isnot(None))
        .group_by(AuditLog.user_id)
        .order_by(total.desc())
    )
    return [
        UserActivity(
            user_id=row.user_id,
            user_email=row.user_email,
            total_actions=row.total_actions,
            inserts=row.inserts or 0,
            updates=row.updates or 0,
            deletes=row.deletes or 0,
            last_activity=row.last_activity,
        )
        for row in result.all()
    ]
