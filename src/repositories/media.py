"""Media record repository.

Only the metadata row is managed here; the object itself lives in storage.
"""

from __future__ import annotations

from typing import Any

from src.errors import ValidationFailure
from src.models.media import MediaAsset
from src.repositories.base import AuditedRepository
from src.schemas.actor import Actor


class MediaRepository(AuditedRepository):
    model = MediaAsset
    label = "media asset"
    key_field = "storage_path"
    writable_fields = frozenset({"filename", "storage_path", "mime_type", "size_bytes", "alt_text"})
    required_fields = ("filename", "storage_path", "mime_type")

    def _prepare(self, values: dict[str, Any], actor: Actor, *, creating: bool) -> dict[str, Any]:
        size = values.get("size_bytes")
        if size is not None and size < 0:
            raise ValidationFailure("size_bytes cannot be negative", field="size_bytes")
        if creating:
            values["uploaded_by"] = actor.id
        return values


media_repository = MediaRepository()
