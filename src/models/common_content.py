"""CommonContent model — reusable blocks (header, footer, CTA) keyed by name.

Audited but not versioned.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Boolean, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, JSONDocument, TimestampMixin


class CommonContent(TimestampMixin, Base):
    __tablename__ = "content_common"

    key: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    title: Mapped[str | None] = mapped_column(String(200), comment="Human-readable name for the admin UI")
    description: Mapped[str | None] = mapped_column(Text)
    data: Mapped[dict[str, Any]] = mapped_column(JSONDocument, default=dict, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_modified_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True))

    def __repr__(self) -> str:
        return f"<CommonContent key={self.key}>"
