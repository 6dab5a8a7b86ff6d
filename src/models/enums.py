"""Domain enums used across SQLAlchemy models and Pydantic schemas.

All enums use str mixin for JSON serialization; columns store the `.value`.
"""

from __future__ import annotations

from enum import Enum


class ContentStatus(str, Enum):
    """Lifecycle status of pages and blog posts.

    Any transition is allowed; the order below is only the editorial convention.
    Only PUBLISHED is publicly visible.
    """

    DRAFT = "draft"
    REVIEW = "review"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class EntityType(str, Enum):
    """Versioned content types — the `entity_type` of a history entry."""

    PAGE = "page"
    BLOG_POST = "blog_post"


class AuditAction(str, Enum):
    """Row-level mutation recorded in the audit log."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class UserRole(str, Enum):
    """CMS user roles (profile data only; authorization is upstream)."""

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class CodePosition(str, Enum):
    """Where a custom code snippet is injected in rendered pages."""

    HEAD = "head"
    BODY_START = "body_start"
    BODY_END = "body_end"
