"""Restore engine — roll a page or post back to a previously captured version.

A restore never rewrites history: it is an ordinary update whose values
come from a snapshot, so it snapshots the current state and moves the
version forward (v3 restored to v1 becomes v4, with v1's content).
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import NotFoundError, ValidationFailure
from src.models.enums import EntityType
from src.schemas.actor import Actor
from src.versioning.history import history_recorder
from src.versioning.store import get_store

logger = logging.getLogger(__name__)


def parse_version(value: Any) -> int:
    """Accept a positive int or a string of digits.

    Raises:
        ValidationFailure: for anything else ("abc", "1.5", 0, -2, True).
    """
    if isinstance(value, bool):
        raise ValidationFailure("Version must be a valid number", field="version")
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdigit()):
            raise ValidationFailure("Version must be a valid number", field="version")
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise ValidationFailure("Version must be a valid number", field="version")
    return value


class RestoreEngine:
    """Stateless — AsyncSession passed per call."""

    async def restore(
        self,
        db: AsyncSession,
        entity_type: EntityType | str,
        slug: str,
        target_version: Any,
        actor: Actor,
    ) -> tuple[Any, int]:
        """Restore ``slug`` to ``target_version``.

        Returns:
            (updated entity, version restored from)

        Raises:
            ValidationFailure: non-numeric / non-positive version, bad entity type.
            NotFoundError: unknown slug, or no snapshot for that version.
        """
        version = parse_version(target_version)
        store = get_store(entity_type)
        definition = store.definition
        entity = await store.find_by_slug(db, slug)

        if version == entity.version:
            # Nothing to roll back to; re-applying the live values is a no-op
            patch = definition.live_patch(entity)
        else:
            entry = await history_recorder.get_entry(db, definition.entity_type, entity.id, version)
            if entry is None:
                raise NotFoundError(
                    f"History version {version} not found for {definition.label} '{slug}'",
                    field="version",
                )
            patch = definition.restore_patch(entry)

        updated = await store.update(
            db,
            slug,
            patch,
            actor,
            change_summary=f"Restored to version {version}",
        )
        logger.info(
            "%s restored: slug=%s from_version=%d now_version=%d by=%s",
            definition.label.capitalize(),
            slug,
            version,
            updated.version,
            actor.id,
        )
        return updated, version


# Module-level singleton
restore_engine = RestoreEngine()
