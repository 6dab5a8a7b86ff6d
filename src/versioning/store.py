"""Versioned record store — current state of pages and blog posts.

All writes for one operation happen in the caller's session/transaction:

    update(slug, patch)
      1. validate the patch and lock the row (no side effects yet)
      2. reject slug collisions / stale expected_version
      3. if a tracked field changes: stage a history snapshot of the OLD row
         at the OLD version, then bump the version by exactly one
      4. apply new values, last_modified_by, updated_at
      5. flush, then write the audit row for the literal column diff

If anything raises, the caller's unit of work rolls back the whole set:
no version bump without its snapshot and no snapshot without its write.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import String, cast, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.audit.trail import audit_trail, row_values
from src.db.guard import flush_or_raise
from src.errors import ConflictError, NotFoundError, ValidationFailure
from src.models.base import utcnow
from src.models.enums import ContentStatus, EntityType
from src.schemas.actor import Actor
from src.versioning.entities import BLOG_POST, PAGE, VersionedEntity, resolve_entity
from src.versioning.history import history_recorder
from src.versioning.status import apply_status_change, parse_status

logger = logging.getLogger(__name__)

# Fields that must be non-empty strings whenever they are supplied
_REQUIRED_TEXT = ("slug", "title")


class VersionedRecordStore:
    """Create/update/delete by slug for one versioned entity type."""

    def __init__(self, definition: VersionedEntity) -> None:
        self.definition = definition
        self.model = definition.model

    # ── Reads ────────────────────────────────────────────────────────

    async def find_by_slug(self, db: AsyncSession, slug: str, *, for_update: bool = False) -> Any:
        """Return the live entity for ``slug``.

        With ``for_update`` the row is locked until the transaction ends, so
        concurrent writers apply their updates one after the other.

        Raises:
            NotFoundError: if no such entity exists.
        """
        query = select(self.model).where(self.model.slug == slug)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await db.execute(query)
        entity = result.scalar_one_or_none()
        if entity is None:
            raise NotFoundError(f"{self.definition.label.capitalize()} '{slug}' not found", field="slug")
        return entity

    async def list(
        self,
        db: AsyncSession,
        *,
        status: str | None = None,
        category: str | None = None,
        tag: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Any]:
        """Live entities, optionally filtered. ``category`` and ``tag`` apply to blog posts only."""
        query = select(self.model)
        if status is not None:
            query = query.where(self.model.status == parse_status(status))
        if (category is not None or tag is not None) and self.definition.entity_type != EntityType.BLOG_POST:
            raise ValidationFailure(
                f"Category and tag filters are not supported for {self.definition.label}s",
                field="category" if category is not None else "tag",
            )
        if category is not None:
            query = query.where(self.model.category == category)
        if tag is not None:
            # Match the quoted element in the serialized list; works for JSON and JSONB
            query = query.where(cast(self.model.tags, String).contains(json.dumps(tag), autoescape=True))
        if self.definition.entity_type == EntityType.PAGE:
            query = query.order_by(self.model.order_index, self.model.slug)
        else:
            query = query.order_by(
                self.model.published_at.desc().nulls_last(),
                self.model.created_at.desc(),
            )
        result = await db.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, db: AsyncSession, data: Mapping[str, Any], actor: Actor) -> Any:
        """Create a new entity in `draft` at version 1.

        Raises:
            ValidationFailure: missing title/slug or unknown fields.
            ConflictError: slug already used by another entity of this type.
        """
        values = {
            key: value
            for key, value in self._clean(data, allowed=self.definition.create_fields).items()
            if value is not None
        }
        for field in _REQUIRED_TEXT:
            if not values.get(field):
                raise ValidationFailure(f"'{field}' is required", field=field)

        await self._ensure_slug_free(db, values["slug"])

        entity = self.model(
            **values,
            status=ContentStatus.DRAFT.value,
            version=1,
            author_id=actor.id,
            last_modified_by=actor.id,
        )
        db.add(entity)
        await self._flush(db, values["slug"], "create")
        await audit_trail.record_insert(db, entity, actor)

        logger.info(
            "%s created: slug=%s id=%s by=%s",
            self.definition.label.capitalize(),
            entity.slug,
            entity.id,
            actor.id,
        )
        return entity

    async def update(
        self,
        db: AsyncSession,
        slug: str,
        patch: Mapping[str, Any],
        actor: Actor,
        *,
        expected_version: int | None = None,
        change_summary: str | None = None,
    ) -> Any:
        """Apply a partial update.

        The version is bumped (and the old state snapshotted) only when a
        tracked field actually changes; bookkeeping-only writes leave it alone.

        Raises:
            ValidationFailure: empty patch, unknown field, invalid status.
            NotFoundError: no entity for ``slug``.
            ConflictError: new slug taken, ``expected_version`` is stale, or a
                concurrent writer already captured this version.
        """
        if not patch:
            raise ValidationFailure("At least one field must be provided for update")
        values = self._clean(patch, allowed=self.definition.update_fields)
        for field in _REQUIRED_TEXT:
            if field in values and not values[field]:
                raise ValidationFailure(f"'{field}' cannot be empty", field=field)
        columns = self.model.__table__.c
        for field, value in values.items():
            if value is None and not columns[field].nullable:
                raise ValidationFailure(f"'{field}' cannot be null", field=field)
        if "status" in values:
            values["status"] = parse_status(values["status"])

        entity = await self.find_by_slug(db, slug, for_update=True)

        if expected_version is not None and entity.version != expected_version:
            raise ConflictError(
                f"{self.definition.label.capitalize()} '{slug}' is at version {entity.version}, "
                f"expected {expected_version}",
                field="version",
            )

        new_slug = values.get("slug")
        if new_slug is not None and new_slug != entity.slug:
            await self._ensure_slug_free(db, new_slug)

        old_values = row_values(entity)
        changed = self.definition.changed_tracked_fields(entity, values)
        if changed:
            history_recorder.snapshot(db, self.definition, entity, actor, change_summary)
            entity.version += 1

        now = utcnow()
        if "status" in values:
            apply_status_change(entity, values["status"], now)
        for field, value in values.items():
            setattr(entity, field, value)
        entity.last_modified_by = actor.id
        entity.updated_at = now

        await self._flush(db, new_slug or slug, "update")
        await audit_trail.record_update(db, entity, old_values, actor)

        if changed:
            logger.info(
                "%s updated: slug=%s version=%d changed=%s by=%s",
                self.definition.label.capitalize(),
                entity.slug,
                entity.version,
                changed,
                actor.id,
            )
        else:
            logger.debug("%s saved without tracked changes: slug=%s", self.definition.label, entity.slug)
        return entity

    async def delete_by_slug(self, db: AsyncSession, slug: str, actor: Actor) -> Any:
        """Hard-delete the live row. History rows for its id are kept.

        Raises:
            NotFoundError: no entity for ``slug``.
        """
        entity = await self.find_by_slug(db, slug, for_update=True)
        record_id = entity.id
        old_values = row_values(entity)

        await db.delete(entity)
        await self._flush(db, slug, "delete")
        await audit_trail.record_delete(db, self.definition.table_name, record_id, old_values, actor)

        logger.warning(
            "%s deleted: slug=%s id=%s by=%s",
            self.definition.label.capitalize(),
            slug,
            record_id,
            actor.id,
        )
        return entity

    # ── Helpers ──────────────────────────────────────────────────────

    def _clean(self, data: Mapping[str, Any], *, allowed: frozenset[str]) -> dict[str, Any]:
        """Reject unknown fields and copy values so callers' dicts are never aliased."""
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ValidationFailure(
                f"Unknown field(s) for {self.definition.label}: {', '.join(unknown)}",
                field=unknown[0],
            )
        return {key: copy.deepcopy(value) for key, value in data.items()}

    async def _ensure_slug_free(self, db: AsyncSession, slug: str) -> None:
        result = await db.execute(select(self.model.id).where(self.model.slug == slug))
        if result.first() is not None:
            raise ConflictError(self._slug_conflict_message(slug), field="slug")

    def _slug_conflict_message(self, slug: str) -> str:
        return f"A {self.definition.label} with slug '{slug}' already exists"

    async def _flush(self, db: AsyncSession, slug: str, operation: str) -> None:
        await flush_or_raise(
            db,
            context=f"{self.definition.label} {operation} (slug={slug})",
            conflict_message=self._slug_conflict_message(slug),
            conflict_field="slug",
            conflicts={
                "content_history": (
                    f"{self.definition.label.capitalize()} '{slug}' was modified concurrently; retry the update",
                    "version",
                ),
            },
        )


page_store = VersionedRecordStore(PAGE)
blog_post_store = VersionedRecordStore(BLOG_POST)

_STORES: dict[EntityType, VersionedRecordStore] = {
    EntityType.PAGE: page_store,
    EntityType.BLOG_POST: blog_post_store,
}


def get_store(entity_type: EntityType | str) -> VersionedRecordStore:
    """Store for an entity type name (ValidationFailure if not versioned)."""
    return _STORES[resolve_entity(entity_type).entity_type]
