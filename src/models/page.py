"""Page model — a slug-addressed site page whose body is a free-form JSON document."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, JSONDocument, TimestampMixin
from src.models.content import VersionedContentMixin


class Page(VersionedContentMixin, TimestampMixin, Base):
    """A versioned CMS page."""

    __tablename__ = "content_pages"

    data: Mapped[dict[str, Any]] = mapped_column(JSONDocument, default=dict, nullable=False)

    # Navigation ordering (lower first) — bookkeeping, not versioned
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Page slug={self.slug} version={self.version} status={self.status}>"
