"""Columns shared by every versioned content type (pages, blog posts).

`version` starts at 1 and is bumped by the versioning store, never by the
database. `author_id` is set once at creation; `last_modified_by` on every write.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import JSONDocument
from src.models.enums import ContentStatus


class VersionedContentMixin:
    """Slug-addressed content with a status lifecycle and a version counter."""

    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    meta_data: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument)

    status: Mapped[str] = mapped_column(
        String(20), default=ContentStatus.DRAFT.value, nullable=False, index=True
    )
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    # Identity of creator / most recent mutator (opaque ids from the identity provider)
    author_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), index=True)
    last_modified_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), index=True)

    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
