"""OpenAI Responses API client for recipe extraction and parsing."""

from collections.abc import Sequence
from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from recipe_intake.domain.recipes import ImageBlob
from recipe_intake.services.llm import (
    LanguageModelClient,
    ModelCompletion,
    ModelTimeoutError,
    ModelUnavailableError,
    to_data_url,
)


@dataclass
class OpenAIModelClient(LanguageModelClient):
    """Model client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "OpenAIModelClient":
        """Create an OpenAI client with a hard timeout and no SDK retries."""
        return cls(
            client=AsyncOpenAI(
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
        """Call OpenAI Responses API with the prompt and all images in one turn."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        content.extend(
            {"type": "input_image", "image_url": to_data_url(image)}
            for image in images
        )
        try:
            response = await self.client.responses.create(
                model=model,
                input=[{"role": "user", "content": content}],
                max_output_tokens=max_tokens,
                temperature=temperature,
                store=False,
            )
        except openai.APITimeoutError as exc:
            raise ModelTimeoutError(str(exc)) from exc
        except openai.APIError as exc:
            raise ModelUnavailableError(str(exc)) from exc

        usage = getattr(response, "usage", None)
        return ModelCompletion(
            text=response.output_text or "",
            model=getattr(response, "model", None) or model,
            input_tokens=getattr(usage, "input_tokens", 0) or 0,
            output_tokens=getattr(usage, "output_tokens", 0) or 0,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
