"""Domain entity -> API response model converters."""

from __future__ import annotations

import base64

from postforge.models.domain import (
    FavoriteEntity,
    GeneratedImageEntity,
    MessageEntity,
    OutputEntity,
    PerformanceNoteEntity,
    SessionEntity,
    SettingEntity,
)
from postforge.models.types import (
    FavoriteDetail,
    ImageDetail,
    ImageSummary,
    MessageDetail,
    OutputDetail,
    PerformanceNoteDetail,
    SessionDetail,
    SettingDetail,
    VisualConcept,
)


def session_to_detail(entity: SessionEntity) -> SessionDetail:
    """Convert SessionEntity to SessionDetail."""
    return SessionDetail(
        id=entity.id,
        title=entity.title,
        original_idea=entity.original_idea,
        status=entity.status,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
        published_at=entity.published_at,
        remix_of_session_id=entity.remix_of_session_id,
    )


def message_to_detail(entity: MessageEntity) -> MessageDetail:
    """Convert MessageEntity to MessageDetail."""
    return MessageDetail(
        id=entity.id,
        session_id=entity.session_id,
        role=entity.role,
        content=entity.content,
        created_at=entity.created_at,
    )


def output_to_detail(entity: OutputEntity) -> OutputDetail:
    """Convert OutputEntity to OutputDetail."""
    return OutputDetail(
        id=entity.id,
        session_id=entity.session_id,
        hooks=entity.hooks,
        hooks_original=entity.hooks_original,
        body_content=entity.body_content,
        body_content_original=entity.body_content_original,
        ctas=entity.ctas,
        ctas_original=entity.ctas_original,
        titles=entity.titles,
        titles_original=entity.titles_original,
        visual_concepts=[VisualConcept(**v) for v in entity.visual_concepts],
        visual_concepts_original=[VisualConcept(**v) for v in entity.visual_concepts_original],
        selected_hook_index=entity.selected_hook_index,
        selected_cta_index=entity.selected_cta_index,
        selected_title_index=entity.selected_title_index,
        selected_visual_index=entity.selected_visual_index,
        revision=entity.revision,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )


def note_to_detail(entity: PerformanceNoteEntity) -> PerformanceNoteDetail:
    """Convert PerformanceNoteEntity to PerformanceNoteDetail."""
    return PerformanceNoteDetail(
        id=entity.id,
        session_id=entity.session_id,
        views=entity.views,
        likes=entity.likes,
        comments=entity.comments,
        reposts=entity.reposts,
        notes=entity.notes,
        recorded_at=entity.recorded_at,
    )


def setting_to_detail(entity: SettingEntity) -> SettingDetail:
    """Convert SettingEntity to SettingDetail."""
    return SettingDetail(
        id=entity.id, key=entity.key, value=entity.value, updated_at=entity.updated_at
    )


def favorite_to_detail(entity: FavoriteEntity) -> FavoriteDetail:
    """Convert FavoriteEntity to FavoriteDetail."""
    return FavoriteDetail(
        id=entity.id,
        type=entity.type,
        content=entity.content,
        source_session_id=entity.source_session_id,
        created_at=entity.created_at,
    )


def image_to_summary(entity: GeneratedImageEntity) -> ImageSummary:
    """Convert GeneratedImageEntity to ImageSummary (no image data)."""
    return ImageSummary(
        id=entity.id,
        session_id=entity.session_id,
        prompt=entity.prompt,
        mime_type=entity.mime_type,
        width=entity.width,
        height=entity.height,
        model=entity.model,
        parent_image_id=entity.parent_image_id,
        visual_concept_index=entity.visual_concept_index,
        created_at=entity.created_at,
    )


def image_to_detail(entity: GeneratedImageEntity) -> ImageDetail:
    """Convert GeneratedImageEntity to ImageDetail with base64 image data."""
    encoded = base64.b64encode(entity.image_data).decode("ascii") if entity.image_data else None
    return ImageDetail(**image_to_summary(entity).model_dump(), image_data=encoded)
