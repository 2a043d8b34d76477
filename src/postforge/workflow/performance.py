"""Performance note recording and the published-session listing.

Domain logic is pure - database operations go through repo.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from postforge.core.errors import InvalidStateError, NotFoundError
from postforge.core.identity import new_id, utcnow
from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.domain import PerformanceNoteEntity, SessionEntity

logger = logging.getLogger(__name__)

SortField = Literal["published_at", "views", "likes", "comments", "reposts"]
SortOrder = Literal["asc", "desc"]


@dataclass
class PerformanceInput:
    """Input for performance note submission. None = not recorded."""

    views: int | None = None
    likes: int | None = None
    comments: int | None = None
    reposts: int | None = None
    notes: str | None = None


@dataclass
class PublishedEntry:
    """A published session paired with its performance note (if any)."""

    session: SessionEntity
    performance: PerformanceNoteEntity | None


def record_performance(
    session: DbSession,
    session_id: str,
    performance_input: PerformanceInput,
) -> PerformanceNoteEntity:
    """Create or replace the performance note of a published session.

    Every submission overwrites all four metrics, so a metric omitted from
    the input becomes null even if it was recorded before.

    Args:
        session: Database session.
        session_id: Session to record metrics for.
        performance_input: Submitted metrics and free-text notes.

    Returns:
        The stored PerformanceNoteEntity.

    Raises:
        NotFoundError: If the session doesn't exist.
        InvalidStateError: If the session isn't published.
    """
    content_session = repo.get_content_session(session, session_id)
    if content_session is None:
        raise NotFoundError(f"Session not found: {session_id}")
    if content_session.status != "published":
        raise InvalidStateError("Performance notes can only be added to published sessions")

    note = repo.upsert_performance_note(
        session,
        PerformanceNoteEntity(
            id=new_id(),
            session_id=session_id,
            views=performance_input.views,
            likes=performance_input.likes,
            comments=performance_input.comments,
            reposts=performance_input.reposts,
            notes=performance_input.notes or "",
            recorded_at=utcnow(),
        ),
    )
    repo.commit(session)

    logger.info(f"Recorded performance for session {session_id}")
    return note


def list_published(
    session: DbSession,
    sort_by: SortField = "published_at",
    sort_order: SortOrder = "desc",
) -> list[PublishedEntry]:
    """List published sessions with their performance notes, sorted.

    Entries whose sort key is null (no note, metric not recorded, or no
    publish date) always go last, whatever the sort order. Ties keep the
    store order (most recently published first).

    Args:
        session: Database session.
        sort_by: Field to sort by.
        sort_order: "asc" or "desc".

    Returns:
        Sorted list of PublishedEntry.
    """
    sessions = repo.get_published_sessions(session)
    notes = repo.get_performance_notes_for_sessions(session, [s.id for s in sessions])
    entries = [PublishedEntry(session=s, performance=notes.get(s.id)) for s in sessions]

    def sort_key(entry: PublishedEntry):
        if sort_by == "published_at":
            return entry.session.published_at
        if entry.performance is None:
            return None
        return getattr(entry.performance, sort_by)

    present = [e for e in entries if sort_key(e) is not None]
    missing = [e for e in entries if sort_key(e) is None]
    present.sort(key=sort_key, reverse=sort_order == "desc")
    return present + missing
