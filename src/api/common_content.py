"""Common content blocks API — header, footer and other shared blocks by key.

Reads are public (the site renderer fetches them); writes require an actor.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import Pagination, require_actor
from src.db.engine import get_session
from src.errors import NotFoundError
from src.models.common_content import CommonContent
from src.repositories.common_content import common_content_repository
from src.schemas.actor import Actor
from src.schemas.catalog import CommonContentIn, CommonContentOut

router = APIRouter(prefix="/api/content/common", tags=["common content"])


async def _block(db: AsyncSession, key: str) -> CommonContent:
    block = await common_content_repository.find_by_key(db, key)
    if block is None:
        raise NotFoundError(f"Common content '{key}' not found", field="key")
    return block


@router.get("", response_model=list[CommonContentOut])
async def list_blocks(
    page: Pagination = Depends(),
    db: AsyncSession = Depends(get_session),
) -> list[CommonContentOut]:
    blocks = await common_content_repository.list(db, limit=page.limit, offset=page.offset)
    return [CommonContentOut.model_validate(b) for b in blocks]


@router.get("/{key}", response_model=CommonContentOut)
async def get_block(
    key: str,
    db: AsyncSession = Depends(get_session),
) -> CommonContentOut:
    return CommonContentOut.model_validate(await _block(db, key))


@router.put("/{key}", response_model=CommonContentOut)
async def upsert_block(
    key: str,
    body: CommonContentIn,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> CommonContentOut:
    """Create the block or update the fields sent."""
    block = await common_content_repository.upsert(db, key, body.model_dump(exclude_unset=True), actor)
    return CommonContentOut.model_validate(block)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_block(
    key: str,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> None:
    block = await _block(db, key)
    await common_content_repository.delete(db, block.id, actor)
