"""History recorder — immutable snapshots of superseded content versions.

Called by the versioned store inside the same transaction as the update,
*before* new values are applied: the snapshot holds the old row tagged with
the old version, and `changed_by` names the actor superseding it.

Read side: per-record history (newest version first, with the changer's
profile) and a recent-changes feed.
"""

from __future__ import annotations

import copy
import logging
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import ValidationFailure
from src.models.enums import EntityType
from src.models.history import ContentHistory
from src.models.user import User
from src.schemas.actor import Actor
from src.schemas.history import HistoryEntryOut
from src.versioning.entities import VersionedEntity, resolve_entity

logger = logging.getLogger(__name__)


def _to_out(entry: ContentHistory, email: str | None, full_name: str | None) -> HistoryEntryOut:
    out = HistoryEntryOut.model_validate(entry)
    return out.model_copy(update={"changed_by_email": email, "changed_by_name": full_name})


class HistoryRecorder:
    """Owns the content_history table. Stateless — AsyncSession passed per call."""

    def snapshot(
        self,
        db: AsyncSession,
        definition: VersionedEntity,
        entity: Any,
        actor: Actor,
        change_summary: str | None = None,
    ) -> ContentHistory:
        """Stage a snapshot of ``entity`` as it is now (i.e. before the pending update)."""
        entry = ContentHistory(
            entity_type=definition.entity_type.value,
            record_id=entity.id,
            version=entity.version,
            title=entity.title,
            content_snapshot=definition.snapshot_content(entity),
            meta_snapshot=copy.deepcopy(entity.meta_data),
            status=entity.status,
            changed_by=actor.id,
            change_summary=change_summary,
        )
        db.add(entry)
        logger.debug(
            "History snapshot staged: %s:%s v%d (superseded by %s)",
            entry.entity_type,
            entry.record_id,
            entry.version,
            actor.id,
        )
        return entry

    async def get_entry(
        self,
        db: AsyncSession,
        entity_type: EntityType | str,
        record_id: uuid.UUID,
        version: int,
    ) -> ContentHistory | None:
        """Look up one snapshot by its composite key."""
        definition = resolve_entity(entity_type)
        result = await db.execute(
            select(ContentHistory).where(
                ContentHistory.entity_type == definition.entity_type.value,
                ContentHistory.record_id == record_id,
                ContentHistory.version == version,
            )
        )
        return result.scalar_one_or_none()

    async def get_history(
        self,
        db: AsyncSession,
        entity_type: EntityType | str,
        record_id: uuid.UUID,
        limit: int = 20,
    ) -> list[HistoryEntryOut]:
        """History for one record, newest version first.

        Works for deleted records too: history is keyed by id, not by a live row.
        """
        if limit < 1:
            raise ValidationFailure("limit must be a positive integer", field="limit")
        definition = resolve_entity(entity_type)
        result = await db.execute(
            select(ContentHistory, User.email, User.full_name)
            .outerjoin(User, User.id == ContentHistory.changed_by)
            .where(
                ContentHistory.entity_type == definition.entity_type.value,
                ContentHistory.record_id == record_id,
            )
            .order_by(ContentHistory.version.desc())
            .limit(limit)
        )
        return [_to_out(entry, email, name) for entry, email, name in result.all()]

    async def count(self, db: AsyncSession, entity_type: EntityType | str, record_id: uuid.UUID) -> int:
        definition = resolve_entity(entity_type)
        result = await db.execute(
            select(func.count(ContentHistory.id)).where(
                ContentHistory.entity_type == definition.entity_type.value,
                ContentHistory.record_id == record_id,
            )
        )
        return result.scalar() or 0

    async def recent_changes(self, db: AsyncSession, days: int = 7, limit: int = 100) -> list[HistoryEntryOut]:
        """Snapshots recorded in the last ``days`` days across all content, newest first."""
        since = datetime.now(UTC) - timedelta(days=days)
        result = await db.execute(
            select(ContentHistory, User.email, User.full_name)
            .outerjoin(User, User.id == ContentHistory.changed_by)
            .where(ContentHistory.created_at >= since)
            .order_by(ContentHistory.created_at.desc())
            .limit(limit)
        )
        return [_to_out(entry, email, name) for entry, email, name in result.all()]

    async def delete_older_than(self, db: AsyncSession, older_than: timedelta) -> int:
        """Retention sweep — the only path that removes history rows."""
        cutoff = datetime.now(UTC) - older_than
        result = await db.execute(
            delete(ContentHistory)
            .where(ContentHistory.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        count = result.rowcount  # type: ignore[attr-defined]
        if count > 0:
            logger.info("Deleted %d content history rows (cutoff=%s)", count, cutoff.date())
        return count


# Module-level singleton
history_recorder = HistoryRecorder()
