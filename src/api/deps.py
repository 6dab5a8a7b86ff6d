"""Request-scoped dependencies for the API routers.

Identity is asserted by the upstream auth gateway via headers and trusted
as-is; no credential verification happens in this service.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import uuid

from fastapi import Depends, Header, HTTPException, Query, Request, status

from src.config import settings
from src.schemas.actor import Actor


async def get_actor(
    request: Request,
    x_user_id: str | None = Header(None),
    x_user_email: str | None = Header(None),
) -> Actor:
    """Actor for the current request; ``id`` is None for anonymous callers."""
    actor_id: uuid.UUID | None = None
    if x_user_id:
        try:
            actor_id = uuid.UUID(x_user_id)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="X-User-Id must be a UUID",
            ) from None
    return Actor(
        id=actor_id,
        label=x_user_email or None,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


async def require_actor(actor: Actor = Depends(get_actor)) -> Actor:
    """FastAPI dependency for mutations — raises 401 without an identity."""
    if actor.id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return actor


class Pagination:
    """limit/offset pagination bounded by the configured max page size."""

    def __init__(
        self,
        limit: int = Query(settings.api.default_page_size, ge=1, le=settings.api.max_page_size),
        offset: int = Query(0, ge=0),
    ) -> None:
        self.limit = limit
        self.offset = offset
