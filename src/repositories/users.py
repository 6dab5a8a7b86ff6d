"""User profile repository (audited, not versioned)."""

from __future__ import annotations

from typing import Any

from src.errors import ValidationFailure
from src.models.enums import UserRole
from src.models.user import User
from src.repositories.base import AuditedRepository
from src.schemas.actor import Actor


class UserRepository(AuditedRepository):
    model = User
    label = "user"
    key_field = "email"
    writable_fields = frozenset({"id", "email", "full_name", "role", "avatar_url"})
    required_fields = ("email",)

    def _prepare(self, values: dict[str, Any], actor: Actor, *, creating: bool) -> dict[str, Any]:
        if not creating and "id" in values:
            raise ValidationFailure("A user's id cannot be changed", field="id")
        if "email" in values and values["email"]:
            values["email"] = values["email"].strip().lower()
        if "role" in values:
            try:
                values["role"] = UserRole(values["role"]).value
            except ValueError:
                valid = ", ".join(r.value for r in UserRole)
                raise ValidationFailure(
                    f"Invalid role '{values['role']}'. Must be one of: {valid}",
                    field="role",
                ) from None
        return values


user_repository = UserRepository()
