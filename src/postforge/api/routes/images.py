"""Images API endpoint.

GET /api/images?session_id= - List image metadata of a session
POST /api/images/generate - Generate an image for a session
POST /api/images/refine - Derive a new image from an existing one
GET /api/images/{image_id} - Get image (base64 JSON, or raw bytes with ?format=image)
DELETE /api/images/{image_id} - Delete image
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Response

from postforge.api.deps import get_db_session, get_image_provider
from postforge.api.serializers import image_to_detail, image_to_summary
from postforge.core.errors import NotFoundError
from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.types import (
    ImageDetail,
    ImageGenerateRequest,
    ImageRefineRequest,
    ImageSummary,
    SuccessResponse,
)
from postforge.providers.base import ImageProviderBase
from postforge.workflow.images import delete_image, generate_image, get_image, refine_image

router = APIRouter()


@router.get("/images", response_model=list[ImageSummary])
def list_images(
    session_id: str,
    session: DbSession = Depends(get_db_session),
) -> list[ImageSummary]:
    """List images of a session, newest first (without image data)."""
    return [image_to_summary(i) for i in repo.list_images_for_session(session, session_id)]


@router.post("/images/generate", response_model=ImageDetail, status_code=201)
def post_generate_image(
    body: ImageGenerateRequest,
    session: DbSession = Depends(get_db_session),
    provider: ImageProviderBase = Depends(get_image_provider),
) -> ImageDetail:
    """Generate and store an image.

    Raises:
        HTTPException: 404 if session not found.
    """
    try:
        image = generate_image(
            session,
            body.session_id,
            body.prompt,
            provider,
            width=body.width,
            height=body.height,
            visual_concept_index=body.visual_concept_index,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Session not found") from e

    return image_to_detail(image)


@router.post("/images/refine", response_model=ImageDetail, status_code=201)
def post_refine_image(
    body: ImageRefineRequest,
    session: DbSession = Depends(get_db_session),
    provider: ImageProviderBase = Depends(get_image_provider),
) -> ImageDetail:
    """Store a refined copy of an image; the source image is unchanged.

    Raises:
        HTTPException: 404 if the source image doesn't exist.
    """
    try:
        image = refine_image(session, body.image_id, body.refinement_prompt, provider)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Original image not found") from e

    return image_to_detail(image)


@router.get("/images/{image_id}", response_model=ImageDetail)
def get_image_by_id(
    image_id: str,
    format: Literal["json", "image"] = "json",
    session: DbSession = Depends(get_db_session),
):
    """Get an image.

    Args:
        image_id: Image to fetch.
        format: ``json`` for metadata with base64 data, ``image`` for the raw bytes.
        session: Database session (injected).

    Raises:
        HTTPException: 404 if the image (or, for raw bytes, its data) doesn't exist.
    """
    try:
        image = get_image(session, image_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Image not found") from e

    if format == "image":
        if image.image_data is None:
            raise HTTPException(status_code=404, detail="Image data not found")
        return Response(content=image.image_data, media_type=image.mime_type)

    return image_to_detail(image)


@router.delete("/images/{image_id}", response_model=SuccessResponse)
def remove_image(
    image_id: str,
    session: DbSession = Depends(get_db_session),
) -> SuccessResponse:
    """Delete an image.

    Raises:
        HTTPException: 404 if the image doesn't exist.
    """
    try:
        delete_image(session, image_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Image not found") from e

    return SuccessResponse()
