"""Placeholder image provider for demo/testing.

Renders a flat-colored SVG card instead of calling an image generation
API. The color is derived from the prompt (and the source image when
refining), so the same request always yields the same bytes.

- Provider adapter: narrow interface `generate_image(request) -> ImageResult`
- Forbidden: DB writes, aggregation logic, UI shaping
"""

from __future__ import annotations

import hashlib
import logging
from xml.sax.saxutils import escape

from postforge.core.identity import truncate
from postforge.models.types import ImageRequest, ImageResult
from postforge.providers.base import ImageProviderBase

logger = logging.getLogger(__name__)

SVG_TEMPLATE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
    'viewBox="0 0 {width} {height}">'
    '<rect width="100%" height="100%" fill="{color}"/>'
    '<text x="50%" y="50%" fill="#ffffff" font-family="sans-serif" font-size="{font_size}" '
    'text-anchor="middle" dominant-baseline="middle">{label}</text>'
    "</svg>"
)


class PlaceholderImageProvider(ImageProviderBase):
    """Deterministic provider returning SVG placeholder cards."""

    name = "placeholder"

    def _compute_seed(self, request: ImageRequest) -> str:
        """Hash the prompt, size and source image into a stable seed."""
        digest = hashlib.sha256(f"{request.prompt}:{request.width}x{request.height}".encode())
        if request.source_image:
            digest.update(request.source_image)
        return digest.hexdigest()

    def generate_image(self, request: ImageRequest) -> ImageResult:
        seed = self._compute_seed(request)
        # Darker half of the color space so the white label stays readable
        r, g, b = (int(seed[i : i + 2], 16) // 2 for i in (0, 2, 4))
        first_line = request.prompt.splitlines()[0] if request.prompt else ""
        svg = SVG_TEMPLATE.format(
            width=request.width,
            height=request.height,
            color=f"#{r:02x}{g:02x}{b:02x}",
            font_size=max(12, min(request.width, request.height) // 24),
            label=escape(truncate(first_line, 60)),
        )
        logger.debug(f"Placeholder image {seed[:12]} ({request.aspect_ratio})")

        return ImageResult(
            image_data=svg.encode("utf-8"),
            mime_type="image/svg+xml",
            width=request.width,
            height=request.height,
        )
