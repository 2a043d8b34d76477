"""Base provider interfaces.

- Provider adapter: narrow interfaces `generate_content(input) -> GeneratedContent`,
  `reply(input, message) -> str` and `generate_image(request) -> ImageResult`
- Forbidden: DB writes, aggregation logic, UI shaping
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from postforge.models.types import GeneratedContent, GenerationInput, ImageRequest, ImageResult


class ContentProviderBase(ABC):
    """Abstract base class for content generation providers.

    Providers implement a narrow interface: generate_content(input) -> GeneratedContent

    Providers must NOT:
    - Write to database
    - Aggregate performance metrics
    - Shape UI output
    """

    name: str = "base"

    @abstractmethod
    def generate_content(self, input: GenerationInput) -> GeneratedContent:
        """Generate hooks, body, CTAs, titles and visual concepts for an idea.

        Args:
            input: Generation input with the raw idea and conversation context.

        Returns:
            GeneratedContent with structured post content.
        """
        pass

    @abstractmethod
    def reply(self, input: GenerationInput, message: str) -> str:
        """Answer a user chat message.

        Args:
            input: Idea and the conversation so far (without ``message``).
            message: The user's new message.

        Returns:
            Assistant reply text.
        """
        pass


class ImageProviderBase(ABC):
    """Abstract base class for image generation providers."""

    name: str = "base"

    @abstractmethod
    def generate_image(self, request: ImageRequest) -> ImageResult:
        """Render an image for a prompt.

        When ``request.source_image`` is set the provider should derive the
        new image from it (refinement).
        """
        pass
