"""BlogPost model — versioned article with excerpt, tags and scheduling fields."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, JSONDocument, TimestampMixin
from src.models.content import VersionedContentMixin


class BlogPost(VersionedContentMixin, TimestampMixin, Base):
    """A versioned blog post."""

    __tablename__ = "blog_posts"

    content: Mapped[dict[str, Any]] = mapped_column(JSONDocument, default=dict, nullable=False)
    excerpt: Mapped[str | None] = mapped_column(Text)
    featured_image: Mapped[str | None] = mapped_column(String(1000))
    tags: Mapped[list[str]] = mapped_column(JSONDocument, default=list, nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), index=True)

    # Scheduling & stats — bookkeeping, not versioned
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    reading_time_minutes: Mapped[int | None] = mapped_column(Integer)

    def __repr__(self) -> str:
        return f"<BlogPost slug={self.slug} version={self.version} status={self.status}>"
