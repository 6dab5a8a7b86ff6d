"""SQLAlchemy ORM models for Folio.

Import all models here so Alembic and Base.metadata.create_all() discover them.
"""

from __future__ import annotations

from src.models.audit import AuditLog
from src.models.base import Base
from src.models.blog_post import BlogPost
from src.models.common_content import CommonContent
from src.models.custom_code import CustomCode
from src.models.enums import (
    AuditAction,
    CodePosition,
    ContentStatus,
    EntityType,
    UserRole,
)
from src.models.history import ContentHistory
from src.models.media import MediaAsset
from src.models.page import Page
from src.models.taxonomy import BlogCategory, BlogTag
from src.models.user import User

__all__ = [
    # Base
    "Base",
    # Versioned content
    "Page",
    "BlogPost",
    "ContentHistory",
    # Audit
    "AuditLog",
    # Other watched tables
    "User",
    "BlogCategory",
    "BlogTag",
    "MediaAsset",
    "CustomCode",
    "CommonContent",
    # Enums
    "ContentStatus",
    "EntityType",
    "AuditAction",
    "UserRole",
    "CodePosition",
]
