"""Audited repository base — CRUD for watched tables that are not versioned.

Every mutation flushes and then writes its audit row through the audit
trail, inside the caller's session/transaction.
"""

from __future__ import annotations

import copy
import logging
import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.audit.trail import audit_trail, row_values
from src.db.guard import flush_or_raise
from src.errors import NotFoundError, ValidationFailure
from src.models.base import Base, utcnow
from src.schemas.actor import Actor

logger = logging.getLogger(__name__)


class AuditedRepository:
    """Subclasses set the class attributes and may override ``_prepare``."""

    model: type[Base]
    label: str
    key_field: str
    writable_fields: frozenset[str]
    required_fields: tuple[str, ...] = ()

    # ── Reads ────────────────────────────────────────────────────────

    async def get(self, db: AsyncSession, record_id: uuid.UUID) -> Any:
        """Raises NotFoundError if the id is unknown."""
        obj = await db.get(self.model, record_id)
        if obj is None:
            raise NotFoundError(f"{self.label.capitalize()} {record_id} not found", field="id")
        return obj

    async def find_by_key(self, db: AsyncSession, key: str) -> Any | None:
        column = getattr(self.model, self.key_field)
        result = await db.execute(select(self.model).where(column == key))
        return result.scalar_one_or_none()

    async def list(self, db: AsyncSession, *, limit: int = 20, offset: int = 0) -> list[Any]:
        column = getattr(self.model, self.key_field)
        result = await db.execute(select(self.model).order_by(column).limit(limit).offset(offset))
        return list(result.scalars().all())

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, db: AsyncSession, data: Mapping[str, Any], actor: Actor) -> Any:
        cleaned = {key: value for key, value in self._clean(data).items() if value is not None}
        values = self._prepare(cleaned, actor, creating=True)
        for field in self.required_fields:
            if values.get(field) in (None, ""):
                raise ValidationFailure(f"'{field}' is required", field=field)

        obj = self.model(**values)
        db.add(obj)
        await self._flush(db, values.get(self.key_field), "create")
        await audit_trail.record_insert(db, obj, actor)

        logger.info("%s created: %s=%s by=%s", self.label.capitalize(), self.key_field, values.get(self.key_field), actor.id)
        return obj

    async def update(
        self,
        db: AsyncSession,
        record_id: uuid.UUID,
        patch: Mapping[str, Any],
        actor: Actor,
    ) -> Any:
        if not patch:
            raise ValidationFailure("At least one field must be provided for update")
        values = self._prepare(self._clean(patch), actor, creating=False)
        for field in self.required_fields:
            if field in values and values[field] in (None, ""):
                raise ValidationFailure(f"'{field}' cannot be empty", field=field)
        columns = self.model.__table__.c
        for field, value in values.items():
            if value is None and not columns[field].nullable:
                raise ValidationFailure(f"'{field}' cannot be null", field=field)

        obj = await self.get(db, record_id)
        old_values = row_values(obj)
        for field, value in values.items():
            setattr(obj, field, value)
        obj.updated_at = utcnow()

        await self._flush(db, values.get(self.key_field, getattr(obj, self.key_field)), "update")
        await audit_trail.record_update(db, obj, old_values, actor)
        return obj

    async def delete(self, db: AsyncSession, record_id: uuid.UUID, actor: Actor) -> Any:
        obj = await self.get(db, record_id)
        old_values = row_values(obj)
        key = getattr(obj, self.key_field)

        await db.delete(obj)
        await self._flush(db, key, "delete")
        await audit_trail.record_delete(db, self.model.__tablename__, record_id, old_values, actor)

        logger.warning("%s deleted: %s=%s by=%s", self.label.capitalize(), self.key_field, key, actor.id)
        return obj

    # ── Helpers ──────────────────────────────────────────────────────

    def _prepare(self, values: dict[str, Any], actor: Actor, *, creating: bool) -> dict[str, Any]:
        """Hook for per-table validation and actor stamping."""
        return values

    def _clean(self, data: Mapping[str, Any]) -> dict[str, Any]:
        unknown = sorted(set(data) - self.writable_fields)
        if unknown:
            raise ValidationFailure(
                f"Unknown field(s) for {self.label}: {', '.join(unknown)}",
                field=unknown[0],
            )
        return {key: copy.deepcopy(value) for key, value in data.items()}

    async def _flush(self, db: AsyncSession, key: Any, operation: str) -> None:
        await flush_or_raise(
            db,
            context=f"{self.label} {operation} ({self.key_field}={key})",
            conflict_message=f"A {self.label} with {self.key_field} '{key}' already exists",
            conflict_field=self.key_field,
        )
