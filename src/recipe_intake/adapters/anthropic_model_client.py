"""Anthropic Messages API client for recipe extraction and parsing."""

from collections.abc import Sequence
from dataclasses import dataclass

import anthropic
from anthropic import AsyncAnthropic

from recipe_intake.domain.recipes import ImageBlob
from recipe_intake.services.llm import (
    LanguageModelClient,
    ModelCompletion,
    ModelTimeoutError,
    ModelUnavailableError,
    to_base64,
)


@dataclass
class AnthropicModelClient(LanguageModelClient):
    """Model client backed by Anthropic Messages API."""

    client: AsyncAnthropic

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "AnthropicModelClient":
        """Create an Anthropic client with a hard timeout and no SDK retries."""
        return cls(
            client=AsyncAnthropic(
                api_key=api_key, timeout=timeout_seconds, max_retries=0
            )
        )

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        images: Sequence[ImageBlob] = (),
        max_tokens: int,
        temperature: float,
    ) -> ModelCompletion:
        """Send the images followed by the prompt as a single user message."""
        content: list[dict[str, object]] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.resolved_media_type,
                    "data": to_base64(image),
                },
            }
            for image in images
        ]
        content.append({"type": "text", "text": prompt})
        try:
            message = await self.client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APITimeoutError as exc:
            raise ModelTimeoutError(str(exc)) from exc
        except anthropic.APIError as exc:
            raise ModelUnavailableError(str(exc)) from exc

        text = "".join(
            block.text
            for block in message.content
            if getattr(block, "type", None) == "text"
        )
        return ModelCompletion(
            text=text,
            model=getattr(message, "model", None) or model,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
