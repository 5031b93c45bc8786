# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the SchoolDesk API.

Run with:
    uvicorn src.api.app:create_app --factory --port 3000
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.api.dependencies import close_db, init_db
from src.api.middleware.auth import AuthMiddleware
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.routes import health
from src.api.v1 import router as v1_router
from src.core.config import get_settings
from src.domains.errors import (
    ConflictError,
    HasDependentsError,
    InvalidReferenceError,
    NotFoundError,
    SchoolDeskError,
)
from src.infrastructure.database.connection import DatabaseError
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging and opens the database engine on startup, then
    disposes the engine on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting SchoolDesk API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================
    await init_db()
    logger.info("Database connection initialized")

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================
    try:
        await close_db()
        logger.info("Database connection closed")
    except SQLAlchemyError as e:
        logger.warning("Error closing database connection: %s", str(e))

    logger.info("Shutting down SchoolDesk API")


# =========================================================================
# Exception handlers
# =========================================================================


def _error_body(exc: SchoolDeskError) -> dict:
    body: dict = {"detail": exc.message}
    missing_ids = getattr(exc, "missing_ids", None)
    if missing_ids is not None:
        body["missing_ids"] = missing_ids
    return body


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Answer 404 for entities that do not exist."""
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body(exc))


async def bad_request_handler(request: Request, exc: SchoolDeskError) -> JSONResponse:
    """Answer 400 for conflicts, blocked deletes and invalid references."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(exc))


async def database_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Answer 500 for storage failures without leaking driver details."""
    logger.error("Database failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database operation failed"},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="SchoolDesk API",
        description="Class, department and section management for schools",
        version="1.0.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # Disable automatic redirects from /path to /path/
        # This prevents 307 redirects that lose Authorization headers
        redirect_slashes=False,
    )

    # =========================================================================
    # Exception handlers (matched along the exception MRO)
    # =========================================================================
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConflictError, bad_request_handler)
    app.add_exception_handler(HasDependentsError, bad_request_handler)
    app.add_exception_handler(InvalidReferenceError, bad_request_handler)
    app.add_exception_handler(SchoolDeskError, bad_request_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    # Auth middleware - validates JWT tokens
    app.add_middleware(AuthMiddleware)

    # Request context - binds request_id/method/path to every log line
    app.add_middleware(RequestContextMiddleware)

    # CORS middleware (added last so it executes first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
