"""Shared fixtures — an in-memory SQLite database per test and a few actors."""

from __future__ import annotations

import uuid

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from src.db.engine import build_session_factory
from src.models import Base, User
from src.schemas.actor import Actor


@pytest_asyncio.fixture
async def engine():
    """Fresh schema on a single shared in-memory connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def editor() -> Actor:
    return Actor(id=uuid.uuid4(), label="editor@example.com", ip_address="10.0.0.1", user_agent="pytest")


@pytest.fixture
def reviewer() -> Actor:
    return Actor(id=uuid.uuid4(), label="reviewer@example.com")


@pytest_asyncio.fixture
async def profiled_actor(db) -> Actor:
    """Actor with a users row but no label from the identity provider."""
    user = User(id=uuid.uuid4(), email="profile@example.com", full_name="Pat Profile", role="editor")
    db.add(user)
    await db.flush()
    return Actor(id=user.id)
