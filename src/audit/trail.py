"""Audit trail writer — records every INSERT/UPDATE/DELETE on watched tables.

Replaces the generic database audit trigger with explicit calls made inside
the caller's transaction: the audit row commits or rolls back together with
the change it describes.

UPDATEs that change no column (ignoring `updated_at`) are not recorded, so
re-saving identical data never pollutes the log.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

from sqlalchemy import delete, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.audit import AuditLog
from src.models.enums import AuditAction
from src.models.user import User
from src.schemas.actor import Actor

logger = logging.getLogger(__name__)

# Auto-maintained bookkeeping columns that never count as a change
IGNORED_FIELDS: frozenset[str] = frozenset({"updated_at"})


def _jsonable(value: Any) -> Any:
    """Convert a column value to something a JSON column can store."""
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_jsonable(v) for v in value]
    return value


def row_values(obj: Any) -> dict[str, Any]:
    """Snapshot every mapped column of ``obj`` as a JSON-safe dict."""
    mapper = inspect(obj).mapper
    return {attr.key: _jsonable(getattr(obj, attr.key)) for attr in mapper.column_attrs}


def diff_fields(old: dict[str, Any], new: dict[str, Any]) -> list[str]:
    """Names of columns whose value differs between two row snapshots."""
    keys = (old.keys() | new.keys()) - IGNORED_FIELDS
    return sorted(k for k in keys if old.get(k) != new.get(k))


class AuditTrail:
    """Stateless audit writer — AsyncSession passed per call."""

    async def record_insert(self, db: AsyncSession, obj: Any, actor: Actor) -> AuditLog:
        """Flush ``obj`` (so its id exists) and log its full new state."""
        await db.flush()
        return await self._write(
            db,
            table_name=obj.__tablename__,
            record_id=obj.id,
            action=AuditAction.INSERT,
            actor=actor,
            new_values=row_values(obj),
        )

    async def record_update(
        self,
        db: AsyncSession,
        obj: Any,
        old_values: dict[str, Any],
        actor: Actor,
    ) -> AuditLog | None:
        """Log an UPDATE if at least one column changed; otherwise write nothing."""
        new_values = row_values(obj)
        changed = diff_fields(old_values, new_values)
        if not changed:
            logger.debug("Audit skipped for no-op update: %s:%s", obj.__tablename__, obj.id)
            return None
        return await self._write(
            db,
            table_name=obj.__tablename__,
            record_id=obj.id,
            action=AuditAction.UPDATE,
            actor=actor,
            old_values=old_values,
            new_values=new_values,
            changed_fields=changed,
        )

    async def record_delete(
        self,
        db: AsyncSession,
        table_name: str,
        record_id: uuid.UUID,
        old_values: dict[str, Any],
        actor: Actor,
    ) -> AuditLog:
        """Log a DELETE with the row's last state."""
        return await self._write(
            db,
            table_name=table_name,
            record_id=record_id,
            action=AuditAction.DELETE,
            actor=actor,
            old_values=old_values,
        )

    async def delete_older_than(self, db: AsyncSession, older_than: timedelta) -> int:
        """Retention sweep — the only path that removes audit rows."""
        cutoff = datetime.now(UTC) - older_than
        result = await db.execute(
            delete(AuditLog)
            .where(AuditLog.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        count = result.rowcount  # type: ignore[attr-defined]
        if count > 0:
            logger.info("Deleted %d audit log entries (cutoff=%s)", count, cutoff.date())
        return count

    async def _write(
        self,
        db: AsyncSession,
        *,
        table_name: str,
        record_id: uuid.UUID,
        action: AuditAction,
        actor: Actor,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        changed_fields: list[str] | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            table_name=table_name,
            record_id=record_id,
            action=action.value,
            user_id=actor.id,
            user_email=await self._resolve_label(db, actor),
            old_values=old_values,
            new_values=new_values,
            changed_fields=changed_fields,
            ip_address=actor.ip_address,
            user_agent=actor.user_agent,
        )
        db.add(entry)
        await db.flush()
        logger.debug(
            "Audit %s %s:%s by %s fields=%s",
            action.value,
            table_name,
            record_id,
            actor.id,
            changed_fields,
        )
        return entry

    async def _resolve_label(self, db: AsyncSession, actor: Actor) -> str | None:
        """Actor label from the identity provider, else the profile email."""
        if actor.label:
            return actor.label
        if actor.id is None:
            return None
        result = await db.execute(select(User.email).where(User.id == actor.id))
        return result.scalar_one_or_none()


# Module-level singleton
audit_trail = AuditTrail()
