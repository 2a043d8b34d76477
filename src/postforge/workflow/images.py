"""Image generation and refinement for a session's visual concepts.

A refinement never overwrites its source: it is stored as a new image
whose ``parent_image_id`` points at the image it was derived from.
"""

from __future__ import annotations

import logging

from postforge.core.errors import NotFoundError
from postforge.core.identity import new_id, utcnow
from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.domain import GeneratedImageEntity
from postforge.models.types import ImageRequest
from postforge.providers.base import ImageProviderBase

logger = logging.getLogger(__name__)


def aspect_ratio(width: int, height: int) -> str:
    """Map pixel dimensions to the closest supported aspect ratio.

    Examples:
        >>> aspect_ratio(1920, 1080)
        '16:9'
        >>> aspect_ratio(1200, 1000)
        '4:3'
        >>> aspect_ratio(512, 512)
        '1:1'
    """
    if width > height * 1.5:
        return "16:9"
    if height > width * 1.5:
        return "9:16"
    if width > height:
        return "4:3"
    if height > width:
        return "3:4"
    return "1:1"


def _render_and_store(
    session: DbSession,
    provider: ImageProviderBase,
    *,
    session_id: str,
    prompt: str,
    width: int,
    height: int,
    source_image: bytes | None = None,
    parent_image_id: str | None = None,
    visual_concept_index: int | None = None,
) -> GeneratedImageEntity:
    result = provider.generate_image(
        ImageRequest(
            prompt=prompt,
            width=width,
            height=height,
            aspect_ratio=aspect_ratio(width, height),
            source_image=source_image,
        )
    )
    entity = GeneratedImageEntity(
        id=new_id(),
        session_id=session_id,
        prompt=prompt,
        model=provider.name,
        image_data=result.image_data,
        mime_type=result.mime_type,
        width=result.width,
        height=result.height,
        parent_image_id=parent_image_id,
        visual_concept_index=visual_concept_index,
        created_at=utcnow(),
    )
    repo.create_image(session, entity)
    repo.commit(session)
    return entity


def generate_image(
    session: DbSession,
    session_id: str,
    prompt: str,
    provider: ImageProviderBase,
    *,
    width: int = 1024,
    height: int = 1024,
    visual_concept_index: int | None = None,
) -> GeneratedImageEntity:
    """Generate an image for a session and store it.

    Args:
        session: Database session.
        session_id: Session the image belongs to.
        prompt: Image description.
        provider: Image generation provider.
        width: Requested width in pixels.
        height: Requested height in pixels.
        visual_concept_index: Visual concept of the output the image illustrates.

    Returns:
        The stored GeneratedImageEntity (with data).

    Raises:
        NotFoundError: If the session doesn't exist.
    """
    if repo.get_content_session(session, session_id) is None:
        raise NotFoundError(f"Session not found: {session_id}")

    entity = _render_and_store(
        session,
        provider,
        session_id=session_id,
        prompt=prompt,
        width=width,
        height=height,
        visual_concept_index=visual_concept_index,
    )
    logger.info(f"Generated image {entity.id} for session {session_id} with {provider.name}")
    return entity


def refine_image(
    session: DbSession,
    image_id: str,
    refinement_prompt: str,
    provider: ImageProviderBase,
) -> GeneratedImageEntity:
    """Derive a new image from an existing one.

    The new image keeps the source's session, size and visual concept;
    its prompt is the source prompt followed by the refinements.

    Raises:
        NotFoundError: If the source image doesn't exist.
    """
    original = repo.get_image(session, image_id)
    if original is None:
        raise NotFoundError("Original image not found")

    entity = _render_and_store(
        session,
        provider,
        session_id=original.session_id,
        prompt=f"{original.prompt}\n\nRefinements: {refinement_prompt}",
        width=original.width,
        height=original.height,
        source_image=original.image_data,
        parent_image_id=original.id,
        visual_concept_index=original.visual_concept_index,
    )
    logger.info(f"Refined image {image_id} into {entity.id}")
    return entity


def get_image(session: DbSession, image_id: str) -> GeneratedImageEntity:
    """Load an image with its data.

    Raises:
        NotFoundError: If the image doesn't exist.
    """
    image = repo.get_image(session, image_id)
    if image is None:
        raise NotFoundError(f"Image not found: {image_id}")
    return image


def delete_image(session: DbSession, image_id: str) -> None:
    """Delete an image. Refinements of it are kept, with the link cleared.

    Raises:
        NotFoundError: If the image doesn't exist.
    """
    if not repo.delete_image(session, image_id):
        raise NotFoundError(f"Image not found: {image_id}")
    repo.commit(session)
    logger.info(f"Deleted image {image_id}")
