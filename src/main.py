"""FastAPI application entry point — wires everything together.

Usage:
    python -m src.main

Starts the Folio CMS API (content, taxonomy, media, users, custom codes, audit).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.api import audit, blog_posts, common_content, custom_codes, media, pages, taxonomy, users
from src.config import settings
from src.db.engine import db_lifespan
from src.errors import CmsError, StorageFailure, ValidationFailure

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting Folio CMS (env=%s)", settings.environment)

    async with db_lifespan(settings) as session_factory:
        app.state.session_factory = session_factory
        logger.info("Database initialized")
        try:
            yield
        finally:
            logger.info("Shutting down Folio CMS...")

    logger.info("Folio CMS shutdown complete")


# ── Error handlers ───────────────────────────────────────────────────


async def handle_cms_error(request: Request, exc: CmsError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    error = ValidationFailure(
        first.get("msg", "Invalid request"),
        field=".".join(location) or None,
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Unhandled database error on %s %s", request.method, request.url.path)
    error = StorageFailure()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# ── FastAPI app ──────────────────────────────────────────────────────


def create_app() -> FastAPI:
    """Build the application; tests use this with their own session factory."""
    application = FastAPI(
        title="Folio CMS API",
        description="Content management backend with version history and audit trail",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(CmsError, handle_cms_error)  # type: ignore[arg-type]
    application.add_exception_handler(RequestValidationError, handle_request_validation)  # type: ignore[arg-type]
    application.add_exception_handler(SQLAlchemyError, handle_database_error)  # type: ignore[arg-type]

    application.include_router(pages.router)
    application.include_router(blog_posts.router)
    application.include_router(taxonomy.router)
    application.include_router(common_content.router)
    application.include_router(media.router)
    application.include_router(users.router)
    application.include_router(custom_codes.router)
    application.include_router(audit.router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "environment": settings.environment,
        }

    return application


app = create_app()


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
