"""Custom code snippet repository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import ValidationFailure
from src.models.custom_code import CustomCode
from src.models.enums import CodePosition
from src.repositories.base import AuditedRepository
from src.schemas.actor import Actor


class CustomCodeRepository(AuditedRepository):
    model = CustomCode
    label = "custom code"
    key_field = "name"
    writable_fields = frozenset({"name", "position", "code", "active"})
    required_fields = ("name", "code")

    async def list_active(self, db: AsyncSession, position: str | None = None) -> list[CustomCode]:
        """Active snippets, optionally for one injection point."""
        query = select(CustomCode).where(CustomCode.active.is_(True))
        if position is not None:
            query = query.where(CustomCode.position == _parse_position(position))
        result = await db.execute(query.order_by(CustomCode.name))
        return list(result.scalars().all())

    def _prepare(self, values: dict[str, Any], actor: Actor, *, creating: bool) -> dict[str, Any]:
        if "position" in values:
            values["position"] = _parse_position(values["position"])
        values["last_modified_by"] = actor.id
        return values


def _parse_position(value: Any) -> str:
    try:
        return CodePosition(value).value
    except ValueError:
        valid = ", ".join(p.value for p in CodePosition)
        raise ValidationFailure(
            f"Invalid position '{value}'. Must be one of: {valid}",
            field="position",
        ) from None


custom_code_repository = CustomCodeRepository()
