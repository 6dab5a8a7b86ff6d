"""ContentHistory model — immutable snapshots of superseded content versions.

One row per past version of a page or blog post. `record_id` deliberately
has no foreign key so history survives hard deletion of the record.
Rows are never updated; they are only removed by the retention sweep.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, CreatedAtMixin, JSONDocument


class ContentHistory(CreatedAtMixin, Base):
    """Snapshot of an entity as it was at `version`, before being superseded."""

    __tablename__ = "content_history"

    entity_type: Mapped[str] = mapped_column(String(30), nullable=False, comment="page, blog_post")
    record_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Snapshot of the old row
    title: Mapped[str | None] = mapped_column(String(500))
    content_snapshot: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    meta_snapshot: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument)
    status: Mapped[str | None] = mapped_column(String(20))

    # Actor whose update superseded this version
    changed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), index=True)
    change_summary: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("entity_type", "record_id", "version", name="uq_content_history_version"),
        Index("idx_content_history_record", "entity_type", "record_id", "version"),
        Index("idx_content_history_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ContentHistory {self.entity_type}:{self.record_id} v{self.version}>"
