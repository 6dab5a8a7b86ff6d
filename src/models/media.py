"""Media model — metadata for files held in object storage.

Upload plumbing is handled by the storage provider; only the record lives here.
"""

from __future__ import annotations

import uuid

from sqlalchemy import BigInteger, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class MediaAsset(TimestampMixin, Base):
    __tablename__ = "media"

    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(1000), unique=True, nullable=False, comment="Object key in the bucket")
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    alt_text: Mapped[str | None] = mapped_column(String(500))
    uploaded_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), index=True)

    def __repr__(self) -> str:
        return f"<MediaAsset path={self.storage_path}>"
