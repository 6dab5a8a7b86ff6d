"""User model — CMS user profile.

Credentials live with the external identity provider; this row only holds
the profile that content and audit queries join against.
"""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin
from src.models.enums import UserRole


class User(TimestampMixin, Base):
    """A CMS editor, admin or viewer."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(200))
    role: Mapped[str] = mapped_column(String(20), default=UserRole.VIEWER.value, nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(1000))

    def __repr__(self) -> str:
        return f"<User id={self.id} role={self.role}>"
