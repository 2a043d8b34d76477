"""Domain models for postforge.

Pure Python dataclasses representing domain entities.
These models are independent of SQLAlchemy and used throughout
the application for clean separation from the database layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal


# ============================================================================
# Session Domain
# ============================================================================

SessionStatus = Literal["in_progress", "complete", "published"]
MessageRole = Literal["user", "assistant"]


@dataclass
class SessionEntity:
    """Domain model for a content-creation session."""

    id: str
    title: str
    original_idea: str
    status: SessionStatus
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None = None
    remix_of_session_id: str | None = None


@dataclass
class MessageEntity:
    """Domain model for a chat message within a session."""

    id: str
    session_id: str
    role: MessageRole
    content: str
    created_at: datetime


# ============================================================================
# Output Domain
# ============================================================================

OutputSection = Literal["hooks", "body", "ctas", "titles", "visuals"]


@dataclass
class OutputEntity:
    """Domain model for generated content of a session.

    The ``*_original`` fields hold the first generated version and are
    never touched by regeneration or edits.
    """

    id: str
    session_id: str
    hooks: list[str]
    hooks_original: list[str]
    body_content: str
    body_content_original: str
    ctas: list[str]
    ctas_original: list[str]
    visual_concepts: list[dict]
    visual_concepts_original: list[dict]
    selected_hook_index: int = -1
    selected_cta_index: int = -1
    selected_visual_index: int = -1
    titles: list[str] = field(default_factory=list)
    titles_original: list[str] = field(default_factory=list)
    selected_title_index: int = -1
    revision: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ============================================================================
# Performance Domain
# ============================================================================


@dataclass
class PerformanceNoteEntity:
    """Domain model for the performance metrics recorded on a session."""

    id: str
    session_id: str
    views: int | None = None
    likes: int | None = None
    comments: int | None = None
    reposts: int | None = None
    notes: str = ""
    recorded_at: datetime | None = None


@dataclass(frozen=True)
class PerformanceRecord:
    """A performance note joined with its published session's title.

    Input unit of the aggregation engine. ``None`` metrics mean
    "not recorded" and are distinct from zero.
    """

    session_id: str
    title: str
    views: int | None = None
    likes: int | None = None
    comments: int | None = None
    reposts: int | None = None
    recorded_at: datetime | None = None


# ============================================================================
# Image Domain
# ============================================================================


@dataclass
class GeneratedImageEntity:
    """Domain model for a generated (or refined) image."""

    id: str
    session_id: str
    prompt: str
    model: str
    image_data: bytes | None = None
    mime_type: str = "image/png"
    width: int = 1024
    height: int = 1024
    parent_image_id: str | None = None
    visual_concept_index: int | None = None
    created_at: datetime | None = None


# ============================================================================
# Settings / Favorites Domain
# ============================================================================

FavoriteType = Literal["hook", "cta", "body", "visual", "template", "title"]


@dataclass
class SettingEntity:
    """Domain model for a user-customizable prompt setting."""

    id: str
    key: str
    value: str
    updated_at: datetime | None = None


@dataclass
class FavoriteEntity:
    """Domain model for a saved favorite snippet."""

    id: str
    type: FavoriteType
    content: object
    source_session_id: str | None = None
    created_at: datetime | None = None


@dataclass
class SessionBundle:
    """A session together with its messages and output."""

    session: SessionEntity
    messages: list[MessageEntity] = field(default_factory=list)
    output: OutputEntity | None = None
