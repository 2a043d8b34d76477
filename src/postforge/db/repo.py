"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries, keeping domain logic pure.
Returns domain models (not SQLAlchemy entities) to external callers.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from postforge.db.schema import (
    ContentSession,
    Favorite,
    GeneratedImage,
    Message,
    Output,
    PerformanceNote,
    Setting,
)
from postforge.models.domain import (
    FavoriteEntity,
    GeneratedImageEntity,
    MessageEntity,
    OutputEntity,
    PerformanceNoteEntity,
    PerformanceRecord,
    SessionEntity,
    SettingEntity,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]

logger = logging.getLogger(__name__)

_OUTPUT_JSON_FIELDS = (
    "hooks",
    "hooks_original",
    "ctas",
    "ctas_original",
    "titles",
    "titles_original",
    "visual_concepts",
    "visual_concepts_original",
)


def _load_json(raw: str | None, fallback: Any) -> Any:
    """Decode a JSON column, falling back on corrupt or empty data."""
    if not raw:
        return fallback
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Discarding undecodable JSON column value: %.40r", raw)
        return fallback


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _session_to_entity(row: ContentSession) -> SessionEntity:
    """Convert SQLAlchemy ContentSession to domain entity."""
    return SessionEntity(
        id=row.id,
        title=row.title,
        original_idea=row.original_idea,
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
        published_at=row.published_at,
        remix_of_session_id=row.remix_of_session_id,
    )


def _message_to_entity(row: Message) -> MessageEntity:
    """Convert SQLAlchemy Message to domain entity."""
    return MessageEntity(
        id=row.id,
        session_id=row.session_id,
        role=row.role,
        content=row.content,
        created_at=row.created_at,
    )


def _output_to_entity(row: Output) -> OutputEntity:
    """Convert SQLAlchemy Output to domain entity."""
    return OutputEntity(
        id=row.id,
        session_id=row.session_id,
        hooks=_load_json(row.hooks, []),
        hooks_original=_load_json(row.hooks_original, []),
        body_content=row.body_content,
        body_content_original=row.body_content_original,
        ctas=_load_json(row.ctas, []),
        ctas_original=_load_json(row.ctas_original, []),
        visual_concepts=_load_json(row.visual_concepts, []),
        visual_concepts_original=_load_json(row.visual_concepts_original, []),
        selected_hook_index=row.selected_hook_index,
        selected_cta_index=row.selected_cta_index,
        selected_visual_index=row.selected_visual_index,
        titles=_load_json(row.titles, []),
        titles_original=_load_json(row.titles_original, []),
        selected_title_index=row.selected_title_index,
        revision=row.revision,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _note_to_entity(row: PerformanceNote) -> PerformanceNoteEntity:
    """Convert SQLAlchemy PerformanceNote to domain entity."""
    return PerformanceNoteEntity(
        id=row.id,
        session_id=row.session_id,
        views=row.views,
        likes=row.likes,
        comments=row.comments,
        reposts=row.reposts,
        notes=row.notes,
        recorded_at=row.recorded_at,
    )


def _setting_to_entity(row: Setting) -> SettingEntity:
    """Convert SQLAlchemy Setting to domain entity."""
    return SettingEntity(id=row.id, key=row.key, value=row.value, updated_at=row.updated_at)


def _favorite_to_entity(row: Favorite) -> FavoriteEntity:
    """Convert SQLAlchemy Favorite to domain entity."""
    return FavoriteEntity(
        id=row.id,
        type=row.type,
        content=_load_json(row.content, row.content),
        source_session_id=row.source_session_id,
        created_at=row.created_at,
    )


def _image_to_entity(row: GeneratedImage, with_data: bool = True) -> GeneratedImageEntity:
    """Convert SQLAlchemy GeneratedImage to domain entity."""
    return GeneratedImageEntity(
        id=row.id,
        session_id=row.session_id,
        prompt=row.prompt,
        model=row.model,
        image_data=row.image_data if with_data else None,
        mime_type=row.mime_type,
        width=row.width,
        height=row.height,
        parent_image_id=row.parent_image_id,
        visual_concept_index=row.visual_concept_index,
        created_at=row.created_at,
    )


# ============================================================================
# Session Repository
# ============================================================================


def get_content_session(session: DbSession, session_id: str) -> SessionEntity | None:
    """Get content session by ID."""
    row = session.get(ContentSession, session_id)
    return _session_to_entity(row) if row else None


def list_content_sessions(
    session: DbSession,
    status: str | None = None,
    search: str | None = None,
) -> list[SessionEntity]:
    """List content sessions, newest first.

    Args:
        session: Database session.
        status: Optional status filter.
        search: Optional substring matched against title or original idea.
    """
    query = session.query(ContentSession)
    if status:
        query = query.filter(ContentSession.status == status)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(ContentSession.title.ilike(pattern), ContentSession.original_idea.ilike(pattern))
        )
    rows = query.order_by(ContentSession.created_at.desc()).all()
    return [_session_to_entity(r) for r in rows]


def create_content_session(session: DbSession, entity: SessionEntity) -> SessionEntity:
    """Create a new content session."""
    row = ContentSession(
        id=entity.id,
        title=entity.title,
        original_idea=entity.original_idea,
        status=entity.status,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
        published_at=entity.published_at,
        remix_of_session_id=entity.remix_of_session_id,
    )
    session.add(row)
    return entity


def update_content_session(
    session: DbSession,
    session_id: str,
    *,
    updated_at: datetime,
    title: str | None = None,
    status: str | None = None,
    published_at: datetime | None = None,
) -> SessionEntity | None:
    """Update session fields; returns None when the session doesn't exist."""
    row = session.get(ContentSession, session_id)
    if row is None:
        return None
    if title is not None:
        row.title = title
    if status is not None:
        row.status = status
    if published_at is not None:
        row.published_at = published_at
    row.updated_at = updated_at
    session.flush()
    return _session_to_entity(row)


def delete_content_session(session: DbSession, session_id: str) -> bool:
    """Delete a session. Messages, output and performance note cascade."""
    row = session.get(ContentSession, session_id)
    if row is None:
        return False
    session.delete(row)
    return True


def count_published_sessions(session: DbSession) -> int:
    """Count sessions with status=published."""
    return (
        session.query(func.count(ContentSession.id))
        .filter(ContentSession.status == "published")
        .scalar()
    ) or 0


def get_published_sessions(session: DbSession) -> list[SessionEntity]:
    """Get published sessions, most recently published first."""
    rows = (
        session.query(ContentSession)
        .filter(ContentSession.status == "published")
        .order_by(ContentSession.published_at.desc())
        .all()
    )
    return [_session_to_entity(r) for r in rows]


# ============================================================================
# Message Repository
# ============================================================================


def get_messages_for_session(session: DbSession, session_id: str) -> list[MessageEntity]:
    """Get all messages of a session in chronological order."""
    rows = (
        session.query(Message)
        .filter(Message.session_id == session_id)
        .order_by(Message.created_at.asc())
        .all()
    )
    return [_message_to_entity(r) for r in rows]


def create_message(session: DbSession, entity: MessageEntity) -> MessageEntity:
    """Create a new message."""
    session.add(
        Message(
            id=entity.id,
            session_id=entity.session_id,
            role=entity.role,
            content=entity.content,
            created_at=entity.created_at,
        )
    )
    return entity


# ============================================================================
# Output Repository
# ============================================================================


def get_output(session: DbSession, session_id: str) -> OutputEntity | None:
    """Get the output of a session."""
    row = session.query(Output).filter(Output.session_id == session_id).first()
    return _output_to_entity(row) if row else None


def create_output(session: DbSession, entity: OutputEntity) -> OutputEntity:
    """Create a new output."""
    row = Output(
        id=entity.id,
        session_id=entity.session_id,
        body_content=entity.body_content,
        body_content_original=entity.body_content_original,
        selected_hook_index=entity.selected_hook_index,
        selected_cta_index=entity.selected_cta_index,
        selected_visual_index=entity.selected_visual_index,
        selected_title_index=entity.selected_title_index,
        revision=entity.revision,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )
    for name in _OUTPUT_JSON_FIELDS:
        setattr(row, name, json.dumps(getattr(entity, name)))
    session.add(row)
    session.flush()
    return _output_to_entity(row)


def update_output(
    session: DbSession,
    session_id: str,
    *,
    updated_at: datetime,
    **fields: Any,
) -> OutputEntity | None:
    """Update current output fields.

    List-valued fields are JSON-encoded; ``*_original`` fields are never
    written here.
    """
    row = session.query(Output).filter(Output.session_id == session_id).first()
    if row is None:
        return None
    for name, value in fields.items():
        if name.endswith("_original"):
            raise ValueError(f"Original output field is immutable: {name}")
        if name in _OUTPUT_JSON_FIELDS:
            value = json.dumps(value)
        setattr(row, name, value)
    row.updated_at = updated_at
    session.flush()
    return _output_to_entity(row)


# ============================================================================
# Performance Repository
# ============================================================================


def get_performance_note(session: DbSession, session_id: str) -> PerformanceNoteEntity | None:
    """Get the performance note of a session."""
    row = session.query(PerformanceNote).filter(PerformanceNote.session_id == session_id).first()
    return _note_to_entity(row) if row else None


def get_performance_notes_for_sessions(
    session: DbSession, session_ids: list[str]
) -> dict[str, PerformanceNoteEntity]:
    """Get performance notes for a list of sessions, keyed by session ID."""
    if not session_ids:
        return {}
    rows = session.query(PerformanceNote).filter(PerformanceNote.session_id.in_(session_ids)).all()
    return {r.session_id: _note_to_entity(r) for r in rows}


def upsert_performance_note(
    session: DbSession,
    entity: PerformanceNoteEntity,
) -> PerformanceNoteEntity:
    """Insert the note, or overwrite the existing note of the same session.

    On update the existing row keeps its ID; all metric fields are replaced,
    so omitted metrics become NULL.
    """
    row = (
        session.query(PerformanceNote)
        .filter(PerformanceNote.session_id == entity.session_id)
        .first()
    )
    if row is None:
        row = PerformanceNote(id=entity.id, session_id=entity.session_id)
        session.add(row)
    row.views = entity.views
    row.likes = entity.likes
    row.comments = entity.comments
    row.reposts = entity.reposts
    row.notes = entity.notes
    row.recorded_at = entity.recorded_at
    session.flush()
    return _note_to_entity(row)


def get_published_performance_records(session: DbSession) -> list[PerformanceRecord]:
    """Get performance notes of published sessions, annotated with title.

    Ordered by recorded_at (then note ID), which fixes the iteration order
    seen by the aggregation tie-break.
    """
    rows = (
        session.query(PerformanceNote, ContentSession.title)
        .join(ContentSession, PerformanceNote.session_id == ContentSession.id)
        .filter(ContentSession.status == "published")
        .order_by(PerformanceNote.recorded_at.asc(), PerformanceNote.id.asc())
        .all()
    )
    return [
        PerformanceRecord(
            session_id=note.session_id,
            title=title,
            views=note.views,
            likes=note.likes,
            comments=note.comments,
            reposts=note.reposts,
            recorded_at=note.recorded_at,
        )
        for note, title in rows
    ]


# ============================================================================
# Settings Repository
# ============================================================================


def list_settings(session: DbSession) -> list[SettingEntity]:
    """Get all settings ordered by key."""
    rows = session.query(Setting).order_by(Setting.key.asc()).all()
    return [_setting_to_entity(r) for r in rows]


def get_setting(session: DbSession, key: str) -> SettingEntity | None:
    """Get setting by key."""
    row = session.query(Setting).filter(Setting.key == key).first()
    return _setting_to_entity(row) if row else None


def update_setting(
    session: DbSession, key: str, value: str, updated_at: datetime
) -> SettingEntity | None:
    """Update a setting value; returns None when the key doesn't exist."""
    row = session.query(Setting).filter(Setting.key == key).first()
    if row is None:
        return None
    row.value = value
    row.updated_at = updated_at
    session.flush()
    return _setting_to_entity(row)


# ============================================================================
# Favorites Repository
# ============================================================================


def list_favorites(session: DbSession, favorite_type: str | None = None) -> list[FavoriteEntity]:
    """Get favorites, newest first, optionally filtered by type."""
    query = session.query(Favorite)
    if favorite_type:
        query = query.filter(Favorite.type == favorite_type)
    rows = query.order_by(Favorite.created_at.desc()).all()
    return [_favorite_to_entity(r) for r in rows]


def create_favorite(session: DbSession, entity: FavoriteEntity) -> FavoriteEntity:
    """Create a new favorite. Content is stored JSON-encoded."""
    session.add(
        Favorite(
            id=entity.id,
            type=entity.type,
            content=json.dumps(entity.content),
            source_session_id=entity.source_session_id,
            created_at=entity.created_at,
        )
    )
    return entity


def delete_favorite(session: DbSession, favorite_id: str) -> bool:
    """Delete a favorite; returns False when it doesn't exist."""
    row = session.get(Favorite, favorite_id)
    if row is None:
        return False
    session.delete(row)
    return True


# ============================================================================
# Image Repository
# ============================================================================


def get_image(session: DbSession, image_id: str) -> GeneratedImageEntity | None:
    """Get image (with data) by ID."""
    row = session.get(GeneratedImage, image_id)
    return _image_to_entity(row) if row else None


def list_images_for_session(session: DbSession, session_id: str) -> list[GeneratedImageEntity]:
    """Get image metadata of a session, newest first. Image data is left out."""
    rows = (
        session.query(GeneratedImage)
        .filter(GeneratedImage.session_id == session_id)
        .order_by(GeneratedImage.created_at.desc())
        .all()
    )
    return [_image_to_entity(r, with_data=False) for r in rows]


def create_image(session: DbSession, entity: GeneratedImageEntity) -> GeneratedImageEntity:
    """Create a new image row."""
    session.add(
        GeneratedImage(
            id=entity.id,
            session_id=entity.session_id,
            prompt=entity.prompt,
            image_data=entity.image_data,
            mime_type=entity.mime_type,
            width=entity.width,
            height=entity.height,
            model=entity.model,
            parent_image_id=entity.parent_image_id,
            visual_concept_index=entity.visual_concept_index,
            created_at=entity.created_at,
        )
    )
    return entity


def delete_image(session: DbSession, image_id: str) -> bool:
    """Delete an image; refinements derived from it keep existing, unlinked."""
    row = session.get(GeneratedImage, image_id)
    if row is None:
        return False
    session.delete(row)
    return True


# ============================================================================
# Batch Operations
# ============================================================================


def commit(session: DbSession) -> None:
    """Commit current transaction."""
    session.commit()
