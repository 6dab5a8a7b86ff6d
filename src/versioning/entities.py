"""Per-type definitions of versioned content.

Each definition says which columns are tracked (a change bumps the version
and snapshots history), which columns a caller may set, and how a row maps
to and from a history snapshot. The store, recorder and restore engine are
generic over these definitions.
"""

from __future__ import annotations

import copy
from typing import Any

from src.errors import ValidationFailure
from src.models.base import Base
from src.models.blog_post import BlogPost
from src.models.enums import EntityType
from src.models.history import ContentHistory
from src.models.page import Page


class VersionedEntity:
    """Base definition; subclasses fill in the class attributes and snapshot mapping."""

    entity_type: EntityType
    model: type[Base]
    label: str
    tracked_fields: tuple[str, ...]
    create_fields: frozenset[str]
    update_fields: frozenset[str]

    def snapshot_content(self, entity: Any) -> dict[str, Any]:
        """The content document stored in ``ContentHistory.content_snapshot``."""
        raise NotImplementedError

    def restore_patch(self, entry: ContentHistory) -> dict[str, Any]:
        """Patch that puts a history snapshot back onto the live row."""
        raise NotImplementedError

    def live_patch(self, entity: Any) -> dict[str, Any]:
        """Patch equal to the live row's current restorable state."""
        raise NotImplementedError

    def changed_tracked_fields(self, entity: Any, patch: dict[str, Any]) -> list[str]:
        """Tracked fields whose patched value differs from the live value."""
        return [
            field
            for field in self.tracked_fields
            if field in patch and patch[field] != getattr(entity, field)
        ]

    @property
    def table_name(self) -> str:
        return self.model.__tablename__


class PageEntity(VersionedEntity):
    entity_type = EntityType.PAGE
    model = Page
    label = "page"
    tracked_fields = ("title", "data", "meta_data", "status")
    create_fields = frozenset({"slug", "title", "data", "meta_data", "order_index"})
    update_fields = frozenset({"slug", "title", "data", "meta_data", "status", "order_index"})

    def snapshot_content(self, entity: Page) -> dict[str, Any]:
        return copy.deepcopy(entity.data or {})

    def restore_patch(self, entry: ContentHistory) -> dict[str, Any]:
        return {
            "title": entry.title,
            "data": copy.deepcopy(entry.content_snapshot),
            "meta_data": copy.deepcopy(entry.meta_snapshot),
            "status": entry.status,
        }

    def live_patch(self, entity: Page) -> dict[str, Any]:
        return {
            "title": entity.title,
            "data": copy.deepcopy(entity.data),
            "meta_data": copy.deepcopy(entity.meta_data),
            "status": entity.status,
        }


class BlogPostEntity(VersionedEntity):
    entity_type = EntityType.BLOG_POST
    model = BlogPost
    label = "blog post"
    tracked_fields = ("title", "content", "excerpt", "meta_data", "status")
    create_fields = frozenset({
        "slug", "title", "content", "excerpt", "featured_image", "tags",
        "category", "meta_data", "scheduled_at", "reading_time_minutes",
    })
    update_fields = create_fields | {"status"}

    # Columns captured together as the post's content document
    snapshot_keys = ("content", "excerpt", "featured_image", "tags", "category")

    def snapshot_content(self, entity: BlogPost) -> dict[str, Any]:
        return {key: copy.deepcopy(getattr(entity, key)) for key in self.snapshot_keys}

    def restore_patch(self, entry: ContentHistory) -> dict[str, Any]:
        snapshot = entry.content_snapshot or {}
        patch = {
            "title": entry.title,
            "content": copy.deepcopy(snapshot.get("content") or {}),
            "excerpt": snapshot.get("excerpt"),
            "featured_image": snapshot.get("featured_image"),
            "tags": list(snapshot.get("tags") or []),
            "category": snapshot.get("category"),
            "meta_data": copy.deepcopy(entry.meta_snapshot),
            "status": entry.status,
        }
        return patch

    def live_patch(self, entity: BlogPost) -> dict[str, Any]:
        patch = self.snapshot_content(entity)
        patch.update(
            title=entity.title,
            meta_data=copy.deepcopy(entity.meta_data),
            status=entity.status,
        )
        return patch


PAGE = PageEntity()
BLOG_POST = BlogPostEntity()

ENTITIES: dict[EntityType, VersionedEntity] = {
    EntityType.PAGE: PAGE,
    EntityType.BLOG_POST: BLOG_POST,
}


def resolve_entity(entity_type: EntityType | str) -> VersionedEntity:
    """Look up the definition for an entity type name.

    Raises:
        ValidationFailure: if the type is not versioned.
    """
    try:
        return ENTITIES[EntityType(entity_type)]
    except ValueError:
        valid = ", ".join(t.value for t in EntityType)
        raise ValidationFailure(
            f"Invalid entity type '{entity_type}'. Must be one of: {valid}",
            field="entity_type",
        ) from None
