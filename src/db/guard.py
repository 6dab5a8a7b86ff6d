"""Flush wrapper that turns driver errors into the application error taxonomy."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import ConflictError, StorageFailure

logger = logging.getLogger(__name__)


async def flush_or_raise(
    db: AsyncSession,
    *,
    context: str,
    conflict_message: str,
    conflict_field: str | None = None,
    conflicts: Mapping[str, tuple[str, str | None]] | None = None,
) -> None:
    """Flush pending writes.

    ``conflicts`` maps a marker found in the driver message (constraint or
    table name) to a more specific ``(message, field)`` pair.

    Raises:
        ConflictError: on a unique-constraint violation.
        StorageFailure: on any other database error (logged with ``context``).
    """
    try:
        await db.flush()
    except IntegrityError as exc:
        logger.warning("Integrity error during %s: %s", context, exc.orig)
        detail = str(exc.orig)
        for marker, (message, field) in (conflicts or {}).items():
            if marker in detail:
                raise ConflictError(message, field=field) from exc
        raise ConflictError(conflict_message, field=conflict_field) from exc
    except SQLAlchemyError as exc:
        logger.exception("Database error during %s", context)
        raise StorageFailure() from exc
