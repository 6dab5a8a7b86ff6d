"""Media library API — metadata records for files in object storage.

The upload itself goes straight to the storage provider; clients register
the resulting object here.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import Pagination, require_actor
from src.db.engine import get_session
from src.repositories.media import media_repository
from src.schemas.actor import Actor
from src.schemas.catalog import MediaIn, MediaOut, MediaPatch

router = APIRouter(prefix="/api/media", tags=["media"])


@router.get("", response_model=list[MediaOut])
async def list_media(
    page: Pagination = Depends(),
    db: AsyncSession = Depends(get_session),
) -> list[MediaOut]:
    assets = await media_repository.list(db, limit=page.limit, offset=page.offset)
    return [MediaOut.model_validate(a) for a in assets]


@router.get("/{media_id}", response_model=MediaOut)
async def get_media(
    media_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> MediaOut:
    return MediaOut.model_validate(await media_repository.get(db, media_id))


@router.post("", response_model=MediaOut, status_code=status.HTTP_201_CREATED)
async def create_media(
    body: MediaIn,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> MediaOut:
    asset = await media_repository.create(db, body.model_dump(), actor)
    return MediaOut.model_validate(asset)


@router.put("/{media_id}", response_model=MediaOut)
async def update_media(
    media_id: uuid.UUID,
    body: MediaPatch,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> MediaOut:
    asset = await media_repository.update(db, media_id, body.model_dump(exclude_unset=True), actor)
    return MediaOut.model_validate(asset)


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_media(
    media_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> None:
    await media_repository.delete(db, media_id, actor)
