"""Custom code snippets API (audited, not versioned)."""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import Pagination, require_actor
from src.db.engine import get_session
from src.repositories.custom_codes import custom_code_repository
from src.schemas.actor import Actor
from src.schemas.catalog import CustomCodeIn, CustomCodeOut, CustomCodePatch

router = APIRouter(prefix="/api/custom-codes", tags=["custom codes"])


@router.get("", response_model=list[CustomCodeOut])
async def list_custom_codes(
    page: Pagination = Depends(),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[CustomCodeOut]:
    codes = await custom_code_repository.list(db, limit=page.limit, offset=page.offset)
    return [CustomCodeOut.model_validate(c) for c in codes]


@router.get("/active", response_model=list[CustomCodeOut])
async def list_active_custom_codes(
    position: str | None = Query(None),
    db: AsyncSession = Depends(get_session),
) -> list[CustomCodeOut]:
    """Public — snippets the site renderer injects."""
    codes = await custom_code_repository.list_active(db, position=position)
    return [CustomCodeOut.model_validate(c) for c in codes]


@router.get("/{code_id}", response_model=CustomCodeOut)
async def get_custom_code(
    code_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> CustomCodeOut:
    return CustomCodeOut.model_validate(await custom_code_repository.get(db, code_id))


@router.post("", response_model=CustomCodeOut, status_code=status.HTTP_201_CREATED)
async def create_custom_code(
    body: CustomCodeIn,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> CustomCodeOut:
    code = await custom_code_repository.create(db, body.model_dump(mode="json"), actor)
    return CustomCodeOut.model_validate(code)


@router.put("/{code_id}", response_model=CustomCodeOut)
async def update_custom_code(
    code_id: uuid.UUID,
    body: CustomCodePatch,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> CustomCodeOut:
    patch = body.model_dump(mode="json", exclude_unset=True)
    code = await custom_code_repository.update(db, code_id, patch, actor)
    return CustomCodeOut.model_validate(code)


@router.patch("/{code_id}/toggle", response_model=CustomCodeOut)
async def toggle_custom_code(
    code_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> CustomCodeOut:
    """Flip the snippet's active flag."""
    current = await custom_code_repository.get(db, code_id)
    code = await custom_code_repository.update(db, code_id, {"active": not current.active}, actor)
    return CustomCodeOut.model_validate(code)


@router.delete("/{code_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_custom_code(
    code_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> None:
    await custom_code_repository.delete(db, code_id, actor)
