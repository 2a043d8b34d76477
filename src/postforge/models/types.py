"""Pydantic models for postforge API.

Request bodies are validated here before they reach the workflow layer;
response models fix the JSON shape returned to the UI.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

SessionStatusLiteral = Literal["in_progress", "complete", "published"]
FavoriteTypeLiteral = Literal["hook", "cta", "body", "visual", "template", "title"]
OutputSectionLiteral = Literal["hooks", "body", "ctas", "titles", "visuals"]


# ============================================================================
# Performance statistics
# ============================================================================


class MetricTotals(BaseModel):
    """Per-metric sums over recorded (non-null) values."""

    views: int = 0
    likes: int = 0
    comments: int = 0
    reposts: int = 0


class MetricAverages(BaseModel):
    """Per-metric averages, rounded to one decimal place."""

    views: float = 0
    likes: float = 0
    comments: float = 0
    reposts: float = 0


class BestPerformer(BaseModel):
    """Session holding the maximum value of a metric."""

    session_id: str
    title: str
    value: int


class BestPerforming(BaseModel):
    """Best performer per metric, null when no value was recorded."""

    by_views: BestPerformer | None = None
    by_likes: BestPerformer | None = None
    by_comments: BestPerformer | None = None
    by_reposts: BestPerformer | None = None


class AggregateStats(BaseModel):
    """Aggregate performance statistics across published sessions."""

    total_published: int
    sessions_with_metrics: int
    totals: MetricTotals
    averages: MetricAverages
    best_performing: BestPerforming


# ============================================================================
# Sessions
# ============================================================================


class SessionCreate(BaseModel):
    """New session (optionally a remix of an existing one)."""

    original_idea: str = Field(min_length=1)
    remix_of_session_id: str | None = None


class SessionUpdate(BaseModel):
    """Partial session update."""

    title: str | None = None
    status: SessionStatusLiteral | None = None


class SessionDetail(BaseModel):
    """Session details for API response."""

    id: str
    title: str
    original_idea: str
    status: SessionStatusLiteral
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None
    remix_of_session_id: str | None


class MessageCreate(BaseModel):
    """Chat message appended to a session."""

    role: Literal["user", "assistant"]
    content: str = Field(min_length=1)


class MessageDetail(BaseModel):
    """Message details for API response."""

    id: str
    session_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime


class ChatRequest(BaseModel):
    """User chat message that should get an assistant reply."""

    session_id: str = Field(min_length=1)
    message: str = Field(min_length=1)


class ChatResponse(BaseModel):
    """The stored user message and the assistant's reply."""

    user_message: MessageDetail
    assistant_message: MessageDetail


# ============================================================================
# Outputs / generation
# ============================================================================


class VisualConcept(BaseModel):
    """Described visual idea for a post (image, carousel, infographic)."""

    description: str
    preview_data: str | None = None


class GenerationInput(BaseModel):
    """Input for a content generation provider.

    ``variation`` increases with every regeneration so providers can
    return different content for the same idea.
    """

    original_idea: str
    messages: list[str] = []
    prompts: dict[str, str] = {}
    variation: int = 0


class GeneratedContent(BaseModel):
    """Structured content returned by a generation provider."""

    hooks: list[str]
    body_content: str
    ctas: list[str]
    visual_concepts: list[VisualConcept]
    titles: list[str] = []


class OutputRequest(BaseModel):
    """Request to (re)generate the output of a session."""

    session_id: str = Field(min_length=1)


class OutputUpdate(BaseModel):
    """Refinement of the current output.

    Selection indices: ``-1`` means no selection, ``-2`` explicitly skipped.
    """

    hooks: list[str] | None = None
    body_content: str | None = None
    ctas: list[str] | None = None
    titles: list[str] | None = None
    visual_concepts: list[VisualConcept] | None = None
    selected_hook_index: int | None = Field(default=None, ge=-2)
    selected_cta_index: int | None = Field(default=None, ge=-2)
    selected_title_index: int | None = Field(default=None, ge=-2)
    selected_visual_index: int | None = Field(default=None, ge=-2)


class OutputDetail(BaseModel):
    """Output details for API response."""

    id: str
    session_id: str
    hooks: list[str]
    hooks_original: list[str]
    body_content: str
    body_content_original: str
    ctas: list[str]
    ctas_original: list[str]
    titles: list[str]
    titles_original: list[str]
    visual_concepts: list[VisualConcept]
    visual_concepts_original: list[VisualConcept]
    selected_hook_index: int
    selected_cta_index: int
    selected_title_index: int
    selected_visual_index: int
    revision: int
    created_at: datetime | None
    updated_at: datetime | None


class OutputResponse(BaseModel):
    """Wrapper so a missing output serializes as ``{"output": null}``."""

    output: OutputDetail | None


class SectionRegenerateRequest(BaseModel):
    """Request to regenerate one section of the current output."""

    session_id: str = Field(min_length=1)
    section: OutputSectionLiteral


class SectionRegenerateResponse(BaseModel):
    output: OutputDetail
    regenerated_section: OutputSectionLiteral


# ============================================================================
# Images
# ============================================================================


class ImageRequest(BaseModel):
    """Input for an image provider."""

    prompt: str
    width: int = 1024
    height: int = 1024
    aspect_ratio: Literal["1:1", "16:9", "9:16", "4:3", "3:4"] = "1:1"
    source_image: bytes | None = None


class ImageResult(BaseModel):
    """Image returned by an image provider."""

    image_data: bytes
    mime_type: str
    width: int
    height: int


class ImageGenerateRequest(BaseModel):
    """Request to generate an image for a session."""

    session_id: str = Field(min_length=1)
    prompt: str = Field(min_length=1)
    width: int = Field(default=1024, ge=64, le=4096)
    height: int = Field(default=1024, ge=64, le=4096)
    visual_concept_index: int | None = Field(default=None, ge=0)


class ImageRefineRequest(BaseModel):
    """Request to derive a new image from an existing one."""

    image_id: str = Field(min_length=1)
    refinement_prompt: str = Field(min_length=1)


class ImageSummary(BaseModel):
    """Image metadata without pixel data (listings)."""

    id: str
    session_id: str
    prompt: str
    mime_type: str
    width: int
    height: int
    model: str
    parent_image_id: str | None
    visual_concept_index: int | None
    created_at: datetime | None


class ImageDetail(ImageSummary):
    """Image with its data, base64-encoded."""

    image_data: str | None


class SessionView(BaseModel):
    """Full session view: session, conversation, and output."""

    session: SessionDetail
    messages: list[MessageDetail]
    output: OutputDetail | None


# ============================================================================
# Performance notes
# ============================================================================


class PerformanceNoteInput(BaseModel):
    """Performance metrics submitted for a published session.

    Omitted metrics are stored as null ("not recorded").
    """

    views: int | None = Field(default=None, ge=0)
    likes: int | None = Field(default=None, ge=0)
    comments: int | None = Field(default=None, ge=0)
    reposts: int | None = Field(default=None, ge=0)
    notes: str | None = None


class PerformanceNoteDetail(BaseModel):
    """Performance note for API response."""

    id: str
    session_id: str
    views: int | None
    likes: int | None
    comments: int | None
    reposts: int | None
    notes: str
    recorded_at: datetime | None


class PerformanceNoteResponse(BaseModel):
    """Wrapper so a missing note serializes as ``{"note": null}``."""

    note: PerformanceNoteDetail | None


class PublishedSession(SessionDetail):
    """Published session with its performance note attached."""

    performance: PerformanceNoteDetail | None


class PublishedSessionsResponse(BaseModel):
    """Listing of published sessions."""

    sessions: list[PublishedSession]


# ============================================================================
# Settings / favorites
# ============================================================================


class SettingDetail(BaseModel):
    """Setting for API response."""

    id: str
    key: str
    value: str
    updated_at: datetime | None


class SettingUpdate(BaseModel):
    """New value for an existing setting."""

    key: str = Field(min_length=1)
    value: str


class FavoriteCreate(BaseModel):
    """Favorite snippet submission."""

    type: FavoriteTypeLiteral
    content: Any = Field(...)
    source_session_id: str | None = None

    @field_validator("content")
    @classmethod
    def _content_not_empty(cls, value: Any) -> Any:
        if value is None or value == "" or value == [] or value == {}:
            raise ValueError("content is required")
        return value


class FavoriteDetail(BaseModel):
    """Favorite for API response."""

    id: str
    type: FavoriteTypeLiteral
    content: Any
    source_session_id: str | None
    created_at: datetime | None


class SuccessResponse(BaseModel):
    """Acknowledgement for deletions."""

    success: bool = True
