"""Sessions API endpoint.

GET /api/sessions - List sessions (filter by status, search)
POST /api/sessions - Create session (optionally as a remix)
GET /api/sessions/{session_id} - Get session with messages and output
PATCH /api/sessions/{session_id} - Update title/status
DELETE /api/sessions/{session_id} - Delete session and related data
POST /api/sessions/{session_id}/messages - Append chat message
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from postforge.api.deps import get_db_session
from postforge.api.serializers import message_to_detail, output_to_detail, session_to_detail
from postforge.core.errors import InvalidStateError, NotFoundError
from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.types import (
    MessageCreate,
    MessageDetail,
    SessionCreate,
    SessionDetail,
    SessionStatusLiteral,
    SessionUpdate,
    SessionView,
    SuccessResponse,
)
from postforge.workflow.sessions import (
    NewSessionInput,
    add_message,
    create_session,
    delete_session,
    get_session_bundle,
    update_session,
)

router = APIRouter()


@router.get("/sessions", response_model=list[SessionDetail])
def list_sessions(
    status: SessionStatusLiteral | None = None,
    search: str | None = None,
    session: DbSession = Depends(get_db_session),
) -> list[SessionDetail]:
    """List sessions, newest first.

    Args:
        status: Optional status filter.
        search: Optional substring matched against title or idea.
        session: Database session (injected).
    """
    sessions = repo.list_content_sessions(session, status=status, search=search)
    return [session_to_detail(s) for s in sessions]


@router.post("/sessions", response_model=SessionDetail, status_code=201)
def post_session(
    body: SessionCreate,
    session: DbSession = Depends(get_db_session),
) -> SessionDetail:
    """Create a new session.

    Raises:
        HTTPException: 404 if the remix source session doesn't exist.
    """
    session_input = NewSessionInput(
        original_idea=body.original_idea,
        remix_of_session_id=body.remix_of_session_id,
    )
    try:
        entity = create_session(session, session_input)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Source session not found") from e

    return session_to_detail(entity)


@router.get("/sessions/{session_id}", response_model=SessionView)
def get_session(
    session_id: str,
    session: DbSession = Depends(get_db_session),
) -> SessionView:
    """Get a session with its messages and output.

    Raises:
        HTTPException: 404 if session not found.
    """
    try:
        bundle = get_session_bundle(session, session_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Session not found") from e

    return SessionView(
        session=session_to_detail(bundle.session),
        messages=[message_to_detail(m) for m in bundle.messages],
        output=output_to_detail(bundle.output) if bundle.output else None,
    )


@router.patch("/sessions/{session_id}", response_model=SessionDetail)
def patch_session(
    session_id: str,
    body: SessionUpdate,
    session: DbSession = Depends(get_db_session),
) -> SessionDetail:
    """Update session title and/or status.

    Raises:
        HTTPException: 404 if session not found, 400 if nothing to update.
    """
    try:
        entity = update_session(session, session_id, title=body.title, status=body.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Session not found") from e
    except InvalidStateError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return session_to_detail(entity)


@router.delete("/sessions/{session_id}", response_model=SuccessResponse)
def remove_session(
    session_id: str,
    session: DbSession = Depends(get_db_session),
) -> SuccessResponse:
    """Delete a session; messages, output and performance note cascade.

    Raises:
        HTTPException: 404 if session not found.
    """
    try:
        delete_session(session, session_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Session not found") from e

    return SuccessResponse()


@router.post("/sessions/{session_id}/messages", response_model=MessageDetail, status_code=201)
def post_message(
    session_id: str,
    body: MessageCreate,
    session: DbSession = Depends(get_db_session),
) -> MessageDetail:
    """Append a chat message to a session.

    Raises:
        HTTPException: 404 if session not found.
    """
    try:
        message = add_message(session, session_id, body.role, body.content)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Session not found") from e

    return message_to_detail(message)
