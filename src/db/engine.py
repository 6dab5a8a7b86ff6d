"""Async database engine, session factory, and lifespan management.

Uses SQLAlchemy 2.0 async with asyncpg driver for PostgreSQL.

The engine is built once during application startup and stored on
``app.state``; request handlers receive sessions through ``get_session``.
There is no module-level engine, so a missing DATABASE_URL fails the
process at startup instead of on the first request.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config import Settings
from src.errors import ConfigurationError

logger = logging.getLogger(__name__)


# ── Engine & session factory ─────────────────────────────────────────


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine from settings.

    Raises:
        ConfigurationError: if DATABASE_URL is empty.
    """
    url = settings.db.database_url.strip()
    if not url:
        raise ConfigurationError("DATABASE_URL is not configured")

    kwargs: dict[str, object] = {
        "echo": settings.log_level == "DEBUG",
        "pool_pre_ping": True,
    }
    if url.startswith("postgresql"):
        kwargs.update(
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@contextlib.asynccontextmanager
async def unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """One transaction: commit on success, roll back on any exception.

    Every write performed inside the block (current-state row, history
    snapshot, audit entry) persists together or not at all.
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI — yields an async DB session.

    Usage:
        @router.get("/example")
        async def handler(db: AsyncSession = Depends(get_session)):
            ...
    """
    async with unit_of_work(request.app.state.session_factory) as session:
        yield session


# ── Lifespan helpers ─────────────────────────────────────────────────


async def init_db(engine: AsyncEngine, *, create_tables: bool) -> None:
    """Verify connectivity and optionally create tables.

    In production, tables are created via Alembic migrations.
    """
    async with engine.begin() as conn:
        # Import here to ensure all models are registered with Base.metadata
        from src.models import Base

        if create_tables:
            await conn.run_sync(Base.metadata.create_all)
    logger.info("Database connection verified (create_tables=%s)", create_tables)


@contextlib.asynccontextmanager
async def db_lifespan(settings: Settings) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Context manager for database lifecycle.

    Usage in FastAPI lifespan:
        @asynccontextmanager
        async def lifespan(app: FastAPI):
            async with db_lifespan(settings) as session_factory:
                app.state.session_factory = session_factory
                yield
    """
    engine = build_engine(settings)
    await init_db(engine, create_tables=not settings.is_production)
    try:
        yield build_session_factory(engine)
    finally:
        await engine.dispose()
