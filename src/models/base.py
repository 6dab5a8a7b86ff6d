"""SQLAlchemy declarative base and shared mixins.

Mutable tables get `id`, `created_at` and `updated_at` via TimestampMixin;
append-only tables (history, audit) use CreatedAtMixin without `updated_at`.
Column types are portable (native UUID/JSONB on PostgreSQL) so the same
models run against SQLite in tests.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSON document column: JSONB on PostgreSQL, plain JSON elsewhere.
# SQL NULL (not JSON 'null') is stored for Python None.
JSONDocument = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class CreatedAtMixin:
    """Mixin adding id (UUID) and created_at, for append-only tables.

    Values are assigned client-side so they are available right after a
    flush without a refresh round-trip; server defaults cover raw SQL inserts.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )


class TimestampMixin(CreatedAtMixin):
    """Adds updated_at on top of id and created_at for mutable tables."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )
