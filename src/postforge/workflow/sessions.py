"""Session lifecycle: creation, remixing, updates, publication.

Domain logic is pure - database operations go through repo.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from postforge.core.errors import InvalidStateError, NotFoundError
from postforge.core.identity import generate_title, new_id, utcnow
from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.domain import MessageEntity, SessionBundle, SessionEntity, SessionStatus
from postforge.models.types import GenerationInput
from postforge.providers.base import ContentProviderBase

logger = logging.getLogger(__name__)


@dataclass
class NewSessionInput:
    """Input for session creation."""

    original_idea: str
    remix_of_session_id: str | None = None


def create_session(session: DbSession, session_input: NewSessionInput) -> SessionEntity:
    """Create a session, optionally as a remix of an existing one.

    Args:
        session: Database session.
        session_input: Idea and optional remix source.

    Returns:
        The new SessionEntity (status in_progress).

    Raises:
        NotFoundError: If the remix source session doesn't exist.
    """
    remix_source = session_input.remix_of_session_id
    if remix_source and repo.get_content_session(session, remix_source) is None:
        raise NotFoundError(f"Source session not found: {remix_source}")

    now = utcnow()
    entity = SessionEntity(
        id=new_id(),
        title=generate_title(session_input.original_idea, remix=bool(remix_source)),
        original_idea=session_input.original_idea,
        status="in_progress",
        created_at=now,
        updated_at=now,
        published_at=None,
        remix_of_session_id=remix_source or None,
    )
    repo.create_content_session(session, entity)
    repo.commit(session)

    logger.info(f"Created session {entity.id}")
    return entity


def update_session(
    session: DbSession,
    session_id: str,
    *,
    title: str | None = None,
    status: SessionStatus | None = None,
) -> SessionEntity:
    """Update title and/or status. Publishing stamps published_at.

    Raises:
        NotFoundError: If the session doesn't exist.
        InvalidStateError: If neither field is given.
    """
    if repo.get_content_session(session, session_id) is None:
        raise NotFoundError(f"Session not found: {session_id}")

    if title is None and status is None:
        raise InvalidStateError("No valid fields to update")

    now = utcnow()
    updated = repo.update_content_session(
        session,
        session_id,
        updated_at=now,
        title=title,
        status=status,
        published_at=now if status == "published" else None,
    )
    repo.commit(session)

    if status == "published":
        logger.info(f"Published session {session_id}")
    return updated


def delete_session(session: DbSession, session_id: str) -> None:
    """Delete a session with its messages, output and performance note.

    Raises:
        NotFoundError: If the session doesn't exist.
    """
    if not repo.delete_content_session(session, session_id):
        raise NotFoundError(f"Session not found: {session_id}")
    repo.commit(session)
    logger.info(f"Deleted session {session_id}")


def add_message(session: DbSession, session_id: str, role: str, content: str) -> MessageEntity:
    """Append a chat message to a session.

    Raises:
        NotFoundError: If the session doesn't exist.
    """
    if repo.get_content_session(session, session_id) is None:
        raise NotFoundError(f"Session not found: {session_id}")

    message = MessageEntity(
        id=new_id(),
        session_id=session_id,
        role=role,
        content=content,
        created_at=utcnow(),
    )
    repo.create_message(session, message)
    repo.commit(session)
    return message


def send_chat_message(
    session: DbSession,
    session_id: str,
    text: str,
    provider: ContentProviderBase,
) -> tuple[MessageEntity, MessageEntity]:
    """Store a user message and the provider's reply to it.

    Args:
        session: Database session.
        session_id: Session the conversation belongs to.
        text: User message.
        provider: Content provider answering the message.

    Returns:
        (user message, assistant message). The reply always sorts after
        the user message.

    Raises:
        NotFoundError: If the session doesn't exist.
    """
    entity = repo.get_content_session(session, session_id)
    if entity is None:
        raise NotFoundError(f"Session not found: {session_id}")

    history = repo.get_messages_for_session(session, session_id)
    settings = {s.key: s.value for s in repo.list_settings(session)}
    reply = provider.reply(
        GenerationInput(
            original_idea=entity.original_idea,
            messages=[m.content for m in history],
            prompts=settings,
        ),
        text,
    )

    user_message = MessageEntity(
        id=new_id(),
        session_id=session_id,
        role="user",
        content=text,
        created_at=utcnow(),
    )
    assistant_message = MessageEntity(
        id=new_id(),
        session_id=session_id,
        role="assistant",
        content=reply,
        created_at=max(utcnow(), user_message.created_at + timedelta(microseconds=1)),
    )
    repo.create_message(session, user_message)
    repo.create_message(session, assistant_message)
    repo.commit(session)

    logger.info(f"Chat reply in session {session_id} from {provider.name}")
    return user_message, assistant_message


def get_session_bundle(session: DbSession, session_id: str) -> SessionBundle:
    """Load a session with its messages and output.

    Raises:
        NotFoundError: If the session doesn't exist.
    """
    entity = repo.get_content_session(session, session_id)
    if entity is None:
        raise NotFoundError(f"Session not found: {session_id}")

    return SessionBundle(
        session=entity,
        messages=repo.get_messages_for_session(session, session_id),
        output=repo.get_output(session, session_id),
    )
