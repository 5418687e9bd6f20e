"""Language model port shared by the extraction and parsing services."""

import base64
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from recipe_intake.domain.recipes import ImageBlob


class ModelUnavailableError(Exception):
    """The model could not be reached or refused the request."""


class ModelTimeoutError(ModelUnavailableError):
    """The model did not answer within the configured timeout."""


@dataclass(frozen=True)
class ModelCompletion:
    """Text completion with token usage."""

    text: str
    model: str
    input_tokens: int
    output_tokens: int


class LanguageModelClient(Protocol):
    """Interface for a text/vision model provider."""

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        images: Sequence[ImageBlob] = (),
        max_tokens: int,
        temperature: float,
    ) -> ModelCompletion:
        """Send one prompt, with optional images, and return the completion."""


def to_base64(image: ImageBlob) -> str:
    return base64.b64encode(image.data).decode("utf-8")


def to_data_url(image: ImageBlob) -> str:
    """Convert an image to a base64 data URL."""
    return f"data:{image.resolved_media_type};base64,{to_base64(image)}"
