"""Performance API endpoint.

GET /api/performance/stats - Aggregate stats across published sessions
GET /api/performance-notes/{session_id} - Get performance note of a session
POST /api/performance-notes/{session_id} - Create or update performance note
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from postforge.aggregation.performance import summarize_performance
from postforge.api.deps import get_db_session
from postforge.api.serializers import note_to_detail
from postforge.core.errors import InvalidStateError, NotFoundError
from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.types import AggregateStats, PerformanceNoteInput, PerformanceNoteResponse
from postforge.workflow.performance import PerformanceInput, record_performance

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/performance/stats", response_model=AggregateStats)
def get_performance_stats(
    session: DbSession = Depends(get_db_session),
) -> AggregateStats:
    """Get aggregate performance statistics.

    Args:
        session: Database session (injected).

    Returns:
        AggregateStats with totals, averages and best performers.

    Raises:
        HTTPException: 500 if the metrics store can't be read.
    """
    try:
        return summarize_performance(session)
    except SQLAlchemyError as e:
        logger.exception("Error fetching performance stats")
        raise HTTPException(status_code=500, detail="Failed to fetch performance stats") from e


@router.get("/performance-notes/{session_id}", response_model=PerformanceNoteResponse)
def get_performance_note(
    session_id: str,
    session: DbSession = Depends(get_db_session),
) -> PerformanceNoteResponse:
    """Get the performance note of a session (null when none recorded)."""
    note = repo.get_performance_note(session, session_id)
    return PerformanceNoteResponse(note=note_to_detail(note) if note else None)


@router.post("/performance-notes/{session_id}", response_model=PerformanceNoteResponse)
def post_performance_note(
    session_id: str,
    body: PerformanceNoteInput,
    session: DbSession = Depends(get_db_session),
) -> PerformanceNoteResponse:
    """Create or update the performance note of a published session.

    Args:
        session_id: Session to record metrics for.
        body: Submitted metrics (omitted = not recorded) and notes.
        session: Database session (injected).

    Raises:
        HTTPException: 404 if session not found, 400 if it isn't published.
    """
    # Build typed input for domain layer
    performance_input = PerformanceInput(
        views=body.views,
        likes=body.likes,
        comments=body.comments,
        reposts=body.reposts,
        notes=body.notes,
    )

    try:
        note = record_performance(session, session_id, performance_input)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Session not found") from e
    except InvalidStateError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return PerformanceNoteResponse(note=note_to_detail(note))
