"""Database schema for postforge.

Tables for sessions, their conversation, generated output and images, and
the post-publish performance notes. Unique constraints enforce one output
and one performance note per session.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class ContentSession(Base):
    """A content-creation session (raw idea through publication)."""

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    original_idea: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="in_progress")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    published_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    remix_of_session_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("sessions.id", ondelete="SET NULL"), nullable=True, index=True
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('in_progress', 'complete', 'published')", name="ck_session_status"
        ),
    )


class Message(Base):
    """Chat message belonging to a session."""

    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    session_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (CheckConstraint("role IN ('user', 'assistant')", name="ck_message_role"),)


class Output(Base):
    """Generated content for a session.

    Invariant: UNIQUE(session_id)
    List-valued fields are stored as JSON text. ``revision`` counts
    regenerations and picks the template variation.
    """

    __tablename__ = "outputs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    session_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    hooks: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    hooks_original: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    body_content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    body_content_original: Mapped[str] = mapped_column(Text, nullable=False, default="")
    ctas: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    ctas_original: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    titles: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    titles_original: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    visual_concepts: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    visual_concepts_original: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    selected_hook_index: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
    selected_cta_index: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
    selected_visual_index: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
    selected_title_index: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
    revision: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)


class PerformanceNote(Base):
    """Post-publish performance metrics for a session.

    Invariant: UNIQUE(session_id)
    Metrics are nullable: NULL means "not recorded", distinct from 0.
    """

    __tablename__ = "performance_notes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    session_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    views: Mapped[int | None] = mapped_column(Integer, nullable=True)
    likes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    comments: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reposts: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    recorded_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)


class Setting(Base):
    """User-customizable prompt setting."""

    __tablename__ = "settings"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    key: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)


class Favorite(Base):
    """Saved snippet (hook, CTA, body, visual, template, title)."""

    __tablename__ = "favorites"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    source_session_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("sessions.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (
        CheckConstraint(
            "type IN ('hook', 'cta', 'body', 'visual', 'template', 'title')",
            name="ck_favorite_type",
        ),
    )


class GeneratedImage(Base):
    """Image generated for a session, optionally refined from a parent image.

    Refinements are new rows pointing at the image they were derived from;
    the parent is never modified.
    """

    __tablename__ = "generated_images"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    session_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    image_data: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    mime_type: Mapped[str] = mapped_column(String(32), nullable=False, default="image/png")
    width: Mapped[int] = mapped_column(Integer, nullable=False, default=1024)
    height: Mapped[int] = mapped_column(Integer, nullable=False, default=1024)
    model: Mapped[str] = mapped_column(String(64), nullable=False)
    parent_image_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("generated_images.id", ondelete="SET NULL"), nullable=True
    )
    visual_concept_index: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
