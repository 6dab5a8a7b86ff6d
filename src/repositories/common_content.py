"""Reusable content block repository (header, footer, CTA...).

Blocks are addressed by ``key``; ``upsert`` is the usual write path from
the admin UI.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.models.common_content import CommonContent
from src.repositories.base import AuditedRepository
from src.schemas.actor import Actor


class CommonContentRepository(AuditedRepository):
    model = CommonContent
    label = "common content block"
    key_field = "key"
    writable_fields = frozenset({"key", "title", "description", "data", "active"})
    required_fields = ("key",)

    async def upsert(
        self,
        db: AsyncSession,
        key: str,
        data: Mapping[str, Any],
        actor: Actor,
    ) -> CommonContent:
        """Create the block for ``key`` or update it in place."""
        existing = await self.find_by_key(db, key)
        if existing is None:
            return await self.create(db, {**data, "key": key}, actor)
        patch = {field: value for field, value in data.items() if field != "key"}
        if not patch:
            return existing
        return await self.update(db, existing.id, patch, actor)

    def _prepare(self, values: dict[str, Any], actor: Actor, *, creating: bool) -> dict[str, Any]:
        values["last_modified_by"] = actor.id
        return values


common_content_repository = CommonContentRepository()
