"""Published sessions API endpoint.

GET /api/published - List published sessions with performance metrics
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from postforge.api.deps import get_db_session
from postforge.api.serializers import note_to_detail, session_to_detail
from postforge.db.repo import DbSession
from postforge.models.types import PublishedSession, PublishedSessionsResponse
from postforge.workflow.performance import SortField, SortOrder, list_published

router = APIRouter()


@router.get("/published", response_model=PublishedSessionsResponse)
def get_published(
    sort_by: SortField = Query("published_at", alias="sortBy"),
    sort_order: SortOrder = Query("desc", alias="sortOrder"),
    session: DbSession = Depends(get_db_session),
) -> PublishedSessionsResponse:
    """List published sessions sorted by publish date or a metric.

    Sessions without a value for the sort field are listed last.
    """
    entries = list_published(session, sort_by=sort_by, sort_order=sort_order)
    return PublishedSessionsResponse(
        sessions=[
            PublishedSession(
                **session_to_detail(entry.session).model_dump(),
                performance=note_to_detail(entry.performance) if entry.performance else None,
            )
            for entry in entries
        ]
    )
