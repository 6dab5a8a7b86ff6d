"""Request/response schemas for versioned content (pages, blog posts).

Input schemas are deliberately lenient: required-field, empty-patch and
status checks are performed by the versioning store so every caller gets
the same ValidationFailure semantics.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


# ── Pages ────────────────────────────────────────────────────────────


class PageCreate(BaseModel):
    slug: str | None = None
    title: str | None = None
    data: dict[str, Any] | None = None
    meta_data: dict[str, Any] | None = None
    order_index: int | None = None


class PageUpdate(BaseModel):
    """Partial update — only fields explicitly sent are applied."""

    slug: str | None = None
    title: str | None = None
    data: dict[str, Any] | None = None
    meta_data: dict[str, Any] | None = None
    status: str | None = None
    order_index: int | None = None
    expected_version: int | None = None


class PageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    title: str
    data: dict[str, Any]
    meta_data: dict[str, Any] | None
    status: str
    version: int
    order_index: int
    author_id: uuid.UUID | None
    last_modified_by: uuid.UUID | None
    published_at: datetime | None
    created_at: datetime
    updated_at: datetime


# ── Blog posts ───────────────────────────────────────────────────────


class BlogPostCreate(BaseModel):
    slug: str | None = None
    title: str | None = None
    content: dict[str, Any] | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    tags: list[str] | None = None
    category: str | None = None
    meta_data: dict[str, Any] | None = None
    scheduled_at: datetime | None = None
    reading_time_minutes: int | None = None


class BlogPostUpdate(BaseModel):
    """Partial update — only fields explicitly sent are applied."""

    slug: str | None = None
    title: str | None = None
    content: dict[str, Any] | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    tags: list[str] | None = None
    category: str | None = None
    meta_data: dict[str, Any] | None = None
    status: str | None = None
    scheduled_at: datetime | None = None
    reading_time_minutes: int | None = None
    expected_version: int | None = None


class BlogPostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    title: str
    content: dict[str, Any]
    excerpt: str | None
    featured_image: str | None
    tags: list[str]
    category: str | None
    meta_data: dict[str, Any] | None
    status: str
    version: int
    author_id: uuid.UUID | None
    last_modified_by: uuid.UUID | None
    published_at: datetime | None
    scheduled_at: datetime | None
    view_count: int
    reading_time_minutes: int | None
    created_at: datetime
    updated_at: datetime


def patch_from(model: BaseModel) -> tuple[dict[str, Any], int | None]:
    """Split an update schema into (patch of explicitly-set fields, expected_version)."""
    patch = model.model_dump(exclude_unset=True)
    expected_version = patch.pop("expected_version", None)
    return patch, expected_version
