"""Pages API — CRUD by slug, version history and restore.

All routes require an authenticated actor.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import Pagination, require_actor
from src.db.engine import get_session
from src.models.enums import EntityType
from src.schemas.actor import Actor
from src.schemas.content import PageCreate, PageOut, PageUpdate, patch_from
from src.schemas.history import HistoryEntryOut, RestoreResult
from src.versioning.history import history_recorder
from src.versioning.restore import restore_engine
from src.versioning.store import page_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pages", tags=["pages"])


@router.get("", response_model=list[PageOut])
async def list_pages(
    status_filter: str | None = Query(None, alias="status"),
    page: Pagination = Depends(),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[PageOut]:
    pages = await page_store.list(db, status=status_filter, limit=page.limit, offset=page.offset)
    return [PageOut.model_validate(p) for p in pages]


@router.get("/{slug}", response_model=PageOut)
async def get_page(
    slug: str,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> PageOut:
    return PageOut.model_validate(await page_store.find_by_slug(db, slug))


@router.get("/{slug}/history", response_model=list[HistoryEntryOut])
async def get_page_history(
    slug: str,
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[HistoryEntryOut]:
    """Captured versions of the page, newest first."""
    page = await page_store.find_by_slug(db, slug)
    return await history_recorder.get_history(db, EntityType.PAGE, page.id, limit=limit)


@router.post("", response_model=PageOut, status_code=status.HTTP_201_CREATED)
async def create_page(
    body: PageCreate,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> PageOut:
    page = await page_store.create(db, body.model_dump(exclude_unset=True), actor)
    return PageOut.model_validate(page)


@router.put("/{slug}", response_model=PageOut)
async def update_page(
    slug: str,
    body: PageUpdate,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> PageOut:
    """Partial update; send `expected_version` to reject stale edits."""
    patch, expected_version = patch_from(body)
    page = await page_store.update(db, slug, patch, actor, expected_version=expected_version)
    return PageOut.model_validate(page)


@router.post("/{slug}/restore/{version}", response_model=RestoreResult)
async def restore_page(
    slug: str,
    version: str,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> RestoreResult:
    """Restore a captured version; the result is a new version."""
    page, restored_from = await restore_engine.restore(db, EntityType.PAGE, slug, version, actor)
    return RestoreResult(
        message=f"Page restored to version {restored_from}",
        restored_from_version=restored_from,
        version=page.version,
        entity=PageOut.model_validate(page).model_dump(mode="json"),
    )


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_page(
    slug: str,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> None:
    await page_store.delete_by_slug(db, slug, actor)
