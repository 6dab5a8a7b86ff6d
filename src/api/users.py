"""User profile API.

The caller's id comes from the identity headers; the profile row is what
history and audit views join against for names and emails.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import Pagination, require_actor
from src.db.engine import get_session
from src.repositories.users import user_repository
from src.schemas.actor import Actor
from src.schemas.catalog import UserOut, UserProfileIn, UserProfilePatch

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/profile", response_model=UserOut)
async def get_profile(
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> UserOut:
    """The calling user's profile."""
    return UserOut.model_validate(await user_repository.get(db, actor.id))


@router.post("/profile", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_profile(
    body: UserProfileIn,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> UserOut:
    """Register the profile for the calling identity (role defaults to viewer)."""
    user = await user_repository.create(db, {**body.model_dump(), "id": actor.id}, actor)
    return UserOut.model_validate(user)


@router.put("/profile", response_model=UserOut)
async def update_profile(
    body: UserProfilePatch,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> UserOut:
    user = await user_repository.update(db, actor.id, body.model_dump(exclude_unset=True), actor)
    return UserOut.model_validate(user)


@router.delete("/profile", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> None:
    await user_repository.delete(db, actor.id, actor)


@router.get("", response_model=list[UserOut])
async def list_users(
    page: Pagination = Depends(),
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> list[UserOut]:
    users = await user_repository.list(db, limit=page.limit, offset=page.offset)
    return [UserOut.model_validate(u) for u in users]


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> UserOut:
    return UserOut.model_validate(await user_repository.get(db, user_id))
