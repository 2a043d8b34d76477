"""Outputs API endpoint.

POST /api/outputs - Generate (or regenerate) output for a session
GET /api/outputs/{session_id} - Get output of a session
PATCH /api/outputs/{session_id} - Refine current output
POST /api/regenerate - Regenerate one section of the current output
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from postforge.api.deps import get_db_session, get_provider
from postforge.api.serializers import output_to_detail
from postforge.core.errors import NotFoundError
from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.types import (
    OutputRequest,
    OutputResponse,
    OutputUpdate,
    SectionRegenerateRequest,
    SectionRegenerateResponse,
)
from postforge.providers.base import ContentProviderBase
from postforge.workflow.outputs import generate_output, refine_output, regenerate_section

router = APIRouter()


@router.post("/outputs", response_model=OutputResponse)
def post_output(
    body: OutputRequest,
    session: DbSession = Depends(get_db_session),
    provider: ContentProviderBase = Depends(get_provider),
) -> OutputResponse:
    """Generate structured output for a session.

    Raises:
        HTTPException: 404 if session not found.
    """
    try:
        output = generate_output(session, body.session_id, provider)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Session not found") from e

    return OutputResponse(output=output_to_detail(output))


@router.get("/outputs/{session_id}", response_model=OutputResponse)
def get_output(
    session_id: str,
    session: DbSession = Depends(get_db_session),
) -> OutputResponse:
    """Get the output of a session (null when not generated yet)."""
    output = repo.get_output(session, session_id)
    return OutputResponse(output=output_to_detail(output) if output else None)


@router.patch("/outputs/{session_id}", response_model=OutputResponse)
def patch_output(
    session_id: str,
    body: OutputUpdate,
    session: DbSession = Depends(get_db_session),
) -> OutputResponse:
    """Apply edits to the current output.

    Raises:
        HTTPException: 404 if the session has no output.
    """
    changes = body.model_dump(exclude_none=True)
    try:
        output = refine_output(session, session_id, changes)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Output not found") from e

    return OutputResponse(output=output_to_detail(output))


@router.post("/regenerate", response_model=SectionRegenerateResponse)
def post_regenerate(
    body: SectionRegenerateRequest,
    session: DbSession = Depends(get_db_session),
    provider: ContentProviderBase = Depends(get_provider),
) -> SectionRegenerateResponse:
    """Regenerate one section (hooks, body, ctas, titles or visuals).

    Raises:
        HTTPException: 404 if the session or its output doesn't exist.
    """
    if repo.get_content_session(session, body.session_id) is None:
        raise HTTPException(status_code=404, detail="Session not found")
    try:
        output = regenerate_section(session, body.session_id, body.section, provider)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return SectionRegenerateResponse(
        output=output_to_detail(output), regenerated_section=body.section
    )
