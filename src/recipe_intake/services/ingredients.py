"""Batch ingredient line parsing with a language model."""

import logging
import math
from dataclasses import dataclass

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from recipe_intake.domain.nutrition import ParsedIngredientLine
from recipe_intake.domain.usage import UsageContext
from recipe_intake.prompts import ingredient_prompt
from recipe_intake.services.json_output import ParsedJson, parse_json_output
from recipe_intake.services.llm import LanguageModelClient, ModelUnavailableError
from recipe_intake.services.pricing import build_usage_report
from recipe_intake.services.units import canonical_unit
from recipe_intake.services.usage import UsageLedger

_logger = logging.getLogger(__name__)


class _ParsedLinePayload(BaseModel):
    """One element of the model's JSON array."""

    model_config = ConfigDict(extra="ignore")

    quantity: float = 0.0
    unit: str = ""
    name: str = Field(
        default="",
        validation_alias=AliasChoices("name", "canonical_name", "ingredient"),
    )
    search_term: str = Field(
        default="", validation_alias=AliasChoices("search_term", "searchTerm")
    )

    @field_validator("quantity", mode="before")
    @classmethod
    def _non_negative_quantity(cls, value: object) -> float:
        if isinstance(value, bool):
            return 0.0
        try:
            quantity = float(value)
        except (TypeError, ValueError):
            return 0.0
        return quantity if math.isfinite(quantity) and quantity > 0 else 0.0

    @field_validator("unit", "name", "search_term", mode="before")
    @classmethod
    def _text(cls, value: object) -> str:
        return "" if value is None else str(value).strip()


def split_ingredient_lines(text: str) -> list[str]:
    """Split ingredient text into trimmed, non-empty lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


@dataclass
class IngredientLineParser:
    """Decomposes ingredient lines into quantity, unit and names in one call."""

    client: LanguageModelClient
    model: str
    ledger: UsageLedger
    max_tokens: int = 2048
    temperature: float = 0.3

    async def parse(
        self, lines: list[str], user_id: str | None = None
    ) -> list[ParsedIngredientLine]:
        """Parse every line; falls back to unparsed lines on any failure."""
        if not lines:
            return []
        try:
            completion = await self.client.complete(
                model=self.model,
                prompt=ingredient_prompt(lines),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except ModelUnavailableError as exc:
            _logger.warning("Ingredient parsing model call failed: %s", exc)
            return _fallback(lines)

        self.ledger.record(
            build_usage_report(
                completion.model, completion.input_tokens, completion.output_tokens
            ),
            UsageContext(
                user_id=user_id,
                service=completion.model,
                operation="ingredient-parse",
            ),
        )

        parsed = _decode(completion.text, lines)
        if parsed is None:
            _logger.warning(
                "Could not parse ingredient batch of %s lines; using fallback",
                len(lines),
            )
            return _fallback(lines)
        return parsed


def _decode(text: str, lines: list[str]) -> list[ParsedIngredientLine] | None:
    result = parse_json_output(text)
    if not isinstance(result, ParsedJson):
        return None
    if not isinstance(result.value, list) or len(result.value) != len(lines):
        return None
    parsed: list[ParsedIngredientLine] = []
    for line, item in zip(lines, result.value, strict=True):
        if not isinstance(item, dict):
            return None
        try:
            payload = _ParsedLinePayload.model_validate(item)
        except ValidationError:
            return None
        name = payload.name or line
        parsed.append(
            ParsedIngredientLine(
                original_text=line,
                quantity=payload.quantity,
                unit=canonical_unit(payload.unit),
                canonical_name=name,
                search_term=payload.search_term or name,
            )
        )
    return parsed


def _fallback(lines: list[str]) -> list[ParsedIngredientLine]:
    return [ParsedIngredientLine.unparsed(line) for line in lines]
