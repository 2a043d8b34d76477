"""Request-scoped dependencies shared by the API routes."""

from __future__ import annotations

from typing import Generator

from fastapi import Request

from postforge.db.repo import DbSession
from postforge.db.session import Database
from postforge.providers.base import ContentProviderBase, ImageProviderBase


def get_db_session(request: Request) -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Database session that is automatically closed after request.
    """
    database: Database = request.app.state.database
    session = database.session()
    try:
        yield session
    finally:
        session.close()


def get_provider(request: Request) -> ContentProviderBase:
    """Dependency to get the configured content generation provider."""
    return request.app.state.provider


def get_image_provider(request: Request) -> ImageProviderBase:
    """Dependency to get the configured image generation provider."""
    return request.app.state.image_provider
