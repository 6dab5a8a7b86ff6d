"""Blog posts API — CRUD by slug, version history and restore.

Reads are open: anonymous callers only see published posts. Writes,
history and restore require an authenticated actor.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import Pagination, get_actor, require_actor
from src.db.engine import get_session
from src.errors import NotFoundError
from src.models.enums import ContentStatus, EntityType
from src.schemas.actor import Actor
from src.schemas.content import BlogPostCreate, BlogPostOut, BlogPostUpdate, patch_from
from src.schemas.history import HistoryEntryOut, RestoreResult
from src.versioning.history import history_recorder
from src.versioning.restore import restore_engine
from src.versioning.status import is_public
from src.versioning.store import blog_post_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blog", tags=["blog"])


@router.get("", response_model=list[BlogPostOut])
async def list_posts(
    status_filter: str | None = Query(None, alias="status"),
    category: str | None = Query(None),
    tag: str | None = Query(None),
    page: Pagination = Depends(),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_actor),
) -> list[BlogPostOut]:
    """Posts, newest first; filter by `category` and/or `tag`."""
    if actor.id is None:
        status_filter = ContentStatus.PUBLISHED.value
    posts = await blog_post_store.list(
        db,
        status=status_filter,
        category=category,
        tag=tag,
        limit=page.limit,
        offset=page.offset,
    )
    return [BlogPostOut.model_validate(p) for p in posts]


@router.get("/{slug}", response_model=BlogPostOut)
async def get_post(
    slug: str,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_actor),
) -> BlogPostOut:
    post = await blog_post_store.find_by_slug(db, slug)
    if actor.id is None and not is_public(post):
        # Unpublished posts are invisible to anonymous readers
        raise NotFoundError(f"Blog post '{slug}' not found", field="slug")
    return BlogPostOut.model_validate(post)


@router.get("/{slug}/history", response_model=list[HistoryEntryOut])
async def get_post_history(
    slug: str,
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[HistoryEntryOut]:
    """Captured versions of the post, newest first."""
    post = await blog_post_store.find_by_slug(db, slug)
    return await history_recorder.get_history(db, EntityType.BLOG_POST, post.id, limit=limit)


@router.post("", response_model=BlogPostOut, status_code=status.HTTP_201_CREATED)
async def create_post(
    body: BlogPostCreate,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> BlogPostOut:
    post = await blog_post_store.create(db, body.model_dump(exclude_unset=True), actor)
    return BlogPostOut.model_validate(post)


@router.put("/{slug}", response_model=BlogPostOut)
async def update_post(
    slug: str,
    body: BlogPostUpdate,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> BlogPostOut:
    """Partial update; send `expected_version` to reject stale edits."""
    patch, expected_version = patch_from(body)
    post = await blog_post_store.update(db, slug, patch, actor, expected_version=expected_version)
    return BlogPostOut.model_validate(post)


@router.post("/{slug}/restore/{version}", response_model=RestoreResult)
async def restore_post(
    slug: str,
    version: str,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> RestoreResult:
    """Restore a captured version; the result is a new version."""
    post, restored_from = await restore_engine.restore(db, EntityType.BLOG_POST, slug, version, actor)
    return RestoreResult(
        message=f"Blog post restored to version {restored_from}",
        restored_from_version=restored_from,
        version=post.version,
        entity=BlogPostOut.model_validate(post).model_dump(mode="json"),
    )


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    slug: str,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> None:
    await blog_post_store.delete_by_slug(db, slug, actor)
