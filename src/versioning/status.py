"""Content status rules.

Any status may move to any other; the editorial order draft → review →
scheduled → published → archived is a UI convention only. The one
structural rule is the publish timestamp: entering `published` stamps
`published_at` (if unset), leaving `published` clears it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from src.errors import ValidationFailure
from src.models.enums import ContentStatus

VALID_STATUSES: tuple[str, ...] = tuple(s.value for s in ContentStatus)


def parse_status(value: Any) -> str:
    """Normalize a status to its stored string value.

    Raises:
        ValidationFailure: if ``value`` is not one of the five statuses.
    """
    try:
        return ContentStatus(value).value
    except ValueError:
        raise ValidationFailure(
            f"Invalid status '{value}'. Must be one of: {', '.join(VALID_STATUSES)}",
            field="status",
        ) from None


def apply_status_change(entity: Any, new_status: str, now: datetime) -> None:
    """Maintain `published_at` for a status change; the caller sets `status` itself."""
    old_status = entity.status
    if new_status == old_status:
        return
    if new_status == ContentStatus.PUBLISHED.value:
        if entity.published_at is None:
            entity.published_at = now
    elif old_status == ContentStatus.PUBLISHED.value:
        entity.published_at = None


def is_public(entity: Any) -> bool:
    return entity.status == ContentStatus.PUBLISHED.value
