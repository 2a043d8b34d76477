"""Favorites API endpoint.

GET /api/favorites - List favorites (optionally by type)
POST /api/favorites - Save a favorite
DELETE /api/favorites/{favorite_id} - Remove a favorite
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from postforge.api.deps import get_db_session
from postforge.api.serializers import favorite_to_detail
from postforge.core.identity import new_id, utcnow
from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.domain import FavoriteEntity
from postforge.models.types import (
    FavoriteCreate,
    FavoriteDetail,
    FavoriteTypeLiteral,
    SuccessResponse,
)

router = APIRouter()


@router.get("/favorites", response_model=list[FavoriteDetail])
def list_favorites(
    type: FavoriteTypeLiteral | None = None,
    session: DbSession = Depends(get_db_session),
) -> list[FavoriteDetail]:
    """List favorites, newest first."""
    return [favorite_to_detail(f) for f in repo.list_favorites(session, type)]


@router.post("/favorites", response_model=FavoriteDetail, status_code=201)
def create_favorite(
    body: FavoriteCreate,
    session: DbSession = Depends(get_db_session),
) -> FavoriteDetail:
    """Save a favorite snippet.

    A source session that doesn't exist is dropped rather than rejected.
    """
    source_session_id = body.source_session_id
    if source_session_id and repo.get_content_session(session, source_session_id) is None:
        source_session_id = None

    favorite = FavoriteEntity(
        id=new_id(),
        type=body.type,
        content=body.content,
        source_session_id=source_session_id,
        created_at=utcnow(),
    )
    repo.create_favorite(session, favorite)
    repo.commit(session)

    return favorite_to_detail(favorite)


@router.delete("/favorites/{favorite_id}", response_model=SuccessResponse)
def delete_favorite(
    favorite_id: str,
    session: DbSession = Depends(get_db_session),
) -> SuccessResponse:
    """Remove a favorite.

    Raises:
        HTTPException: 404 if favorite not found.
    """
    if not repo.delete_favorite(session, favorite_id):
        raise HTTPException(status_code=404, detail="Favorite not found")
    repo.commit(session)

    return SuccessResponse()
