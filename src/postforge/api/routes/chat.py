"""Chat API endpoint.

POST /api/chat - Send a user message and get the assistant's reply
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from postforge.api.deps import get_db_session, get_provider
from postforge.api.serializers import message_to_detail
from postforge.core.errors import NotFoundError
from postforge.db.repo import DbSession
from postforge.models.types import ChatRequest, ChatResponse
from postforge.providers.base import ContentProviderBase
from postforge.workflow.sessions import send_chat_message

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
def post_chat(
    body: ChatRequest,
    session: DbSession = Depends(get_db_session),
    provider: ContentProviderBase = Depends(get_provider),
) -> ChatResponse:
    """Store the user's message and the provider's reply.

    Raises:
        HTTPException: 404 if session not found.
    """
    try:
        user_message, assistant_message = send_chat_message(
            session, body.session_id, body.message, provider
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Session not found") from e

    return ChatResponse(
        user_message=message_to_detail(user_message),
        assistant_message=message_to_detail(assistant_message),
    )
