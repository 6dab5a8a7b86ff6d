"""Retention sweeps for content history and the audit log — run from cron.

Two tiers, both age-based on `created_at`:
- Content history: HISTORY_RETENTION_MONTHS (default 1)
- Audit log: AUDIT_RETENTION_MONTHS (default 3)

Live pages and posts are never touched. Both sweeps run in one transaction.

Usage:
    python -m src.maintenance.retention
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.audit.trail import audit_trail
from src.config import settings
from src.db.engine import build_engine, build_session_factory, unit_of_work
from src.versioning.history import history_recorder

logger = logging.getLogger(__name__)


def months(n: int) -> timedelta:
    """Retention windows count a month as 30 days."""
    return timedelta(days=n * 30)


async def cleanup_history_older_than(db: AsyncSession, duration: timedelta) -> int:
    """Delete history rows older than ``duration``. Returns the count removed."""
    return await history_recorder.delete_older_than(db, duration)


async def cleanup_audit_log_older_than(db: AsyncSession, duration: timedelta) -> int:
    """Delete audit rows older than ``duration``. Returns the count removed."""
    return await audit_trail.delete_older_than(db, duration)


async def enforce_retention(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> dict[str, int]:
    """Run both sweeps with the configured windows. Returns a summary dict.

    Idempotent: running twice is harmless. When no session factory is given
    one is built from settings and its engine disposed afterwards.
    """
    engine = None
    if session_factory is None:
        engine = build_engine(settings)
        session_factory = build_session_factory(engine)

    summary: dict[str, int] = {
        "history_deleted": 0,
        "audit_logs_deleted": 0,
    }
    try:
        async with unit_of_work(session_factory) as db:
            summary["history_deleted"] = await cleanup_history_older_than(
                db, months(settings.retention.history_retention_months)
            )
            summary["audit_logs_deleted"] = await cleanup_audit_log_older_than(
                db, months(settings.retention.audit_retention_months)
            )
    except Exception:
        logger.exception("Retention job failed")
        raise
    finally:
        if engine is not None:
            await engine.dispose()

    logger.info(
        "Retention job complete: history=%d audit=%d",
        summary["history_deleted"],
        summary["audit_logs_deleted"],
    )
    return summary


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(enforce_retention())
