"""Recipe extraction from images, text and PDFs using a language model."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from recipe_intake.domain.recipes import (
    ExtractedRecipe,
    ExtractionFailure,
    ExtractionFailureReason,
    ExtractionOutcome,
    ExtractionRequest,
    ExtractionSuccess,
    ImageBlob,
    PromptVariant,
)
from recipe_intake.domain.usage import UsageContext
from recipe_intake.prompts import extraction_prompt
from recipe_intake.services.json_output import ParsedJson, parse_json_output
from recipe_intake.services.llm import (
    LanguageModelClient,
    ModelTimeoutError,
    ModelUnavailableError,
)
from recipe_intake.services.pricing import build_usage_report
from recipe_intake.services.usage import UsageLedger

CORE_FIELDS = ("title", "ingredients", "instructions")

_OPERATIONS = {
    PromptVariant.SINGLE: "recipe-import",
    PromptVariant.MULTI_PAGE: "recipe-import-multi",
    PromptVariant.TEXT: "recipe-import-text",
}

_logger = logging.getLogger(__name__)


class PdfExtractionError(Exception):
    """The PDF could not be read."""


class PdfTextExtractor(Protocol):
    """Interface for turning a PDF into plain text."""

    def extract_text(self, pdf_bytes: bytes) -> str:
        """Return the text content of a PDF."""


def confidence_score(recipe: ExtractedRecipe) -> float:
    """Fraction of title, ingredients and instructions that were extracted."""
    present = sum(1 for name in CORE_FIELDS if getattr(recipe, name))
    return present / len(CORE_FIELDS)


@dataclass
class RecipeExtractionService:
    """Builds prompts, calls the model once and validates the draft recipe."""

    client: LanguageModelClient
    model: str
    ledger: UsageLedger
    pdf_extractor: PdfTextExtractor | None = None
    max_tokens: int = 2048
    temperature: float = 0.1

    async def extract(
        self, request: ExtractionRequest, user_id: str | None = None
    ) -> ExtractionOutcome:
        """Extract a recipe from whichever input the request carries."""
        if request.text is not None:
            return await self.extract_from_text(request.text, user_id=user_id)
        return await self.extract_from_images(list(request.images), user_id=user_id)

    async def extract_from_images(
        self,
        images: Sequence[ImageBlob],
        variant: PromptVariant | None = None,
        user_id: str | None = None,
    ) -> ExtractionOutcome:
        """Extract one recipe from all images in a single model call."""
        if not images:
            return ExtractionFailure(
                reason=ExtractionFailureReason.NO_CONTENT, detail="No images provided"
            )
        if variant is None:
            variant = (
                PromptVariant.MULTI_PAGE if len(images) > 1 else PromptVariant.SINGLE
            )
        prompt = extraction_prompt(variant, image_count=len(images))
        return await self._run(
            prompt, images, operation=_OPERATIONS[variant], user_id=user_id
        )

    async def extract_from_text(
        self,
        document: str,
        user_id: str | None = None,
        operation: str = _OPERATIONS[PromptVariant.TEXT],
    ) -> ExtractionOutcome:
        """Extract a recipe from a plain-text document."""
        if not document.strip():
            return ExtractionFailure(
                reason=ExtractionFailureReason.NO_CONTENT, detail="No text provided"
            )
        prompt = extraction_prompt(PromptVariant.TEXT, document=document.strip())
        return await self._run(prompt, (), operation=operation, user_id=user_id)

    async def extract_from_pdf(
        self, pdf_bytes: bytes, user_id: str | None = None
    ) -> ExtractionOutcome:
        """Extract a recipe from the text layer of a PDF."""
        if self.pdf_extractor is None:
            raise RuntimeError("No PDF text extractor configured")
        try:
            text = self.pdf_extractor.extract_text(pdf_bytes)
        except PdfExtractionError as exc:
            _logger.warning("PDF text extraction failed: %s", exc)
            return ExtractionFailure(
                reason=ExtractionFailureReason.NO_CONTENT, detail=str(exc)
            )
        if not text.strip():
            return ExtractionFailure(
                reason=ExtractionFailureReason.NO_CONTENT, detail="No text found in PDF"
            )
        return await self.extract_from_text(
            text, user_id=user_id, operation="recipe-import-pdf"
        )

    async def _run(
        self,
        prompt: str,
        images: Sequence[ImageBlob],
        *,
        operation: str,
        user_id: str | None,
    ) -> ExtractionOutcome:
        try:
            completion = await self.client.complete(
                model=self.model,
                prompt=prompt,
                images=images,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except ModelTimeoutError as exc:
            _logger.warning("Extraction model call timed out: %s", exc)
            return ExtractionFailure(
                reason=ExtractionFailureReason.MODEL_TIMEOUT, detail=str(exc)
            )
        except ModelUnavailableError as exc:
            _logger.warning("Extraction model call failed: %s", exc)
            return ExtractionFailure(
                reason=ExtractionFailureReason.MODEL_UNAVAILABLE, detail=str(exc)
            )

        usage = build_usage_report(
            completion.model, completion.input_tokens, completion.output_tokens
        )
        self.ledger.record(
            usage,
            UsageContext(
                user_id=user_id, service=completion.model, operation=operation
            ),
        )

        parsed = parse_json_output(completion.text)
        if not isinstance(parsed, ParsedJson) or not isinstance(parsed.value, dict):
            _logger.warning(
                "Unparseable extraction response (%s chars)", len(completion.text)
            )
            return ExtractionFailure(
                reason=ExtractionFailureReason.UNPARSEABLE,
                usage=usage,
                detail="Could not parse recipe data from model response",
            )
        try:
            recipe = ExtractedRecipe.model_validate(parsed.value)
        except ValidationError as exc:
            _logger.warning("Extracted recipe failed validation: %s", exc)
            return ExtractionFailure(
                reason=ExtractionFailureReason.UNPARSEABLE,
                usage=usage,
                detail="Model response did not match the recipe shape",
            )
        return ExtractionSuccess(
            recipe=recipe, confidence=confidence_score(recipe), usage=usage
        )
