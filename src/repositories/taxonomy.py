"""Blog category and tag repositories."""

from __future__ import annotations

from src.models.taxonomy import BlogCategory, BlogTag
from src.repositories.base import AuditedRepository


class CategoryRepository(AuditedRepository):
    model = BlogCategory
    label = "category"
    key_field = "slug"
    writable_fields = frozenset({"name", "slug", "description"})
    required_fields = ("name", "slug")


class TagRepository(AuditedRepository):
    model = BlogTag
    label = "tag"
    key_field = "slug"
    writable_fields = frozenset({"name", "slug", "description"})
    required_fields = ("name", "slug")


category_repository = CategoryRepository()
tag_repository = TagRepository()
