"""AuditLog model — literal row-level change trail for every watched table.

This table is append-only — no updates. Deletes happen only through the
age-based retention sweep.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, CreatedAtMixin, JSONDocument


class AuditLog(CreatedAtMixin, Base):
    """Immutable audit trail entry."""

    __tablename__ = "audit_log"

    table_name: Mapped[str] = mapped_column(String(100), nullable=False)
    record_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    action: Mapped[str] = mapped_column(String(10), nullable=False, index=True, comment="INSERT, UPDATE, DELETE")

    # Actor (label denormalized so the trail stays readable after the user is deleted)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True))
    user_email: Mapped[str | None] = mapped_column(String(255))

    old_values: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, comment="NULL for INSERT")
    new_values: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, comment="NULL for DELETE")
    changed_fields: Mapped[list[str] | None] = mapped_column(JSONDocument, comment="UPDATE only")

    # Request context
    ip_address: Mapped[str | None] = mapped_column(String(64))
    user_agent: Mapped[str | None] = mapped_column(String(500))

    __table_args__ = (
        Index("idx_audit_log_table_record", "table_name", "record_id", "created_at"),
        Index("idx_audit_log_created", "created_at"),
        Index("idx_audit_log_user", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} {self.table_name}:{self.record_id}>"
