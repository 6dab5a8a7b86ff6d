"""Blog categories and tags API (audited, not versioned)."""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import Pagination, require_actor
from src.db.engine import get_session
from src.errors import NotFoundError
from src.repositories.base import AuditedRepository
from src.repositories.taxonomy import category_repository, tag_repository
from src.schemas.actor import Actor
from src.schemas.catalog import TaxonomyIn, TaxonomyOut, TaxonomyPatch

router = APIRouter(prefix="/api/blog-taxonomy", tags=["blog taxonomy"])

_REPOSITORIES: dict[str, AuditedRepository] = {
    "categories": category_repository,
    "tags": tag_repository,
}


def _repository(kind: str) -> AuditedRepository:
    try:
        return _REPOSITORIES[kind]
    except KeyError:
        raise NotFoundError(f"Unknown taxonomy '{kind}'") from None


@router.get("/{kind}", response_model=list[TaxonomyOut])
async def list_terms(
    kind: str,
    page: Pagination = Depends(),
    db: AsyncSession = Depends(get_session),
) -> list[TaxonomyOut]:
    """All categories or tags, ordered by slug."""
    terms = await _repository(kind).list(db, limit=page.limit, offset=page.offset)
    return [TaxonomyOut.model_validate(t) for t in terms]


@router.post("/{kind}", response_model=TaxonomyOut, status_code=status.HTTP_201_CREATED)
async def create_term(
    kind: str,
    body: TaxonomyIn,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> TaxonomyOut:
    term = await _repository(kind).create(db, body.model_dump(), actor)
    return TaxonomyOut.model_validate(term)


@router.put("/{kind}/{term_id}", response_model=TaxonomyOut)
async def update_term(
    kind: str,
    term_id: uuid.UUID,
    body: TaxonomyPatch,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> TaxonomyOut:
    term = await _repository(kind).update(db, term_id, body.model_dump(exclude_unset=True), actor)
    return TaxonomyOut.model_validate(term)


@router.delete("/{kind}/{term_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_term(
    kind: str,
    term_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_actor),
) -> None:
    await _repository(kind).delete(db, term_id, actor)
