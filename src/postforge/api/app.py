"""FastAPI application factory.

API layer:
- Validates inputs, reads/writes DB
- Returns payloads for UI
- Forbidden: generation logic, metric aggregation math
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from postforge.db.session import Database
from postforge.providers.base import ContentProviderBase, ImageProviderBase
from postforge.providers.placeholder import PlaceholderImageProvider
from postforge.providers.template import TemplateProvider

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def create_app(
    database: Database | None = None,
    provider: ContentProviderBase | None = None,
    image_provider: ImageProviderBase | None = None,
) -> FastAPI:
    """Create FastAPI application.

    The database handle is opened (and its schema created) on startup and
    closed on shutdown. A handle that is already open is used as-is.

    Args:
        database: Storage handle. Defaults to the SQLite file at $POSTFORGE_DB_PATH.
        provider: Content generation provider. Defaults to TemplateProvider.
        image_provider: Image generation provider. Defaults to PlaceholderImageProvider.

    Returns:
        Configured FastAPI application.
    """
    if database is None:
        database = Database.from_path(os.environ.get("POSTFORGE_DB_PATH"))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_handle = not database.is_open
        if owns_handle:
            database.open()
            database.create_schema()
        try:
            yield
        finally:
            if owns_handle:
                database.close()

    app = FastAPI(
        title="postforge API",
        description="Content-creation assistant with performance tracking",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.provider = provider or TemplateProvider()
    app.state.image_provider = image_provider or PlaceholderImageProvider()

    # Add CORS middleware for UI access
    origins = os.environ.get("POSTFORGE_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """Report storage failures as a generic 500."""
        logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Database error"})

    # Include routes
    from postforge.api.routes import (
        chat,
        favorites,
        images,
        outputs,
        performance,
        published,
        sessions,
        settings,
    )

    app.include_router(sessions.router, prefix="/api")
    app.include_router(chat.router, prefix="/api")
    app.include_router(outputs.router, prefix="/api")
    app.include_router(images.router, prefix="/api")
    app.include_router(performance.router, prefix="/api")
    app.include_router(published.router, prefix="/api")
    app.include_router(settings.router, prefix="/api")
    app.include_router(favorites.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
