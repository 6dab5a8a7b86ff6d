"""CustomCode model — snippets (analytics, widgets) injected into rendered pages."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin
from src.models.enums import CodePosition


class CustomCode(TimestampMixin, Base):
    __tablename__ = "custom_codes"

    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    position: Mapped[str] = mapped_column(String(20), default=CodePosition.HEAD.value, nullable=False)
    code: Mapped[str] = mapped_column(Text, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    last_modified_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True))

    def __repr__(self) -> str:
        return f"<CustomCode name={self.name} position={self.position} active={self.active}>"
