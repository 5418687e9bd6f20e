"""Recipe nutrition estimation from free-text ingredient lists."""

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum

from recipe_intake.domain.nutrition import (
    NutrientVector,
    ParsedIngredientLine,
    RecipeNutritionResult,
    SkippedIngredient,
    SkipReason,
)
from recipe_intake.services.ingredients import (
    IngredientLineParser,
    split_ingredient_lines,
)
from recipe_intake.services.nutrient_lookup import (
    NutrientLookupError,
    NutrientLookupService,
    NutrientLookupTimeoutError,
)
from recipe_intake.services.units import to_grams

_REFERENCE_GRAMS = 100.0

# Approximate daily values for a 2000 kcal diet.
DAILY_VALUES: dict[str, float] = {
    "calories": 2000,
    "protein_g": 50,
    "fat_g": 78,
    "carbs_g": 275,
    "fiber_g": 28,
    "sugar_g": 50,
    "sodium_mg": 2300,
}

_logger = logging.getLogger(__name__)


class HealthLevel(StrEnum):
    """Share of the daily value a serving provides."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


def scale_nutrition(
    vector: NutrientVector, base_amount: float, target_amount: float
) -> NutrientVector:
    """Scale a vector measured for ``base_amount`` to ``target_amount``."""
    return vector.scaled(target_amount / base_amount)


def health_indicator(nutrient: str, value: float) -> HealthLevel:
    """Classify a per-serving value against its approximate daily value."""
    percentage = value / DAILY_VALUES[nutrient] * 100
    if percentage < 10:  # noqa: PLR2004
        return HealthLevel.LOW
    if percentage < 20:  # noqa: PLR2004
        return HealthLevel.MODERATE
    return HealthLevel.HIGH


@dataclass(frozen=True)
class _Contribution:
    line: ParsedIngredientLine
    nutrients: NutrientVector | None = None
    skip_reason: SkipReason | None = None


@dataclass
class NutritionCalculator:
    """Parses ingredients, looks each one up and sums the scaled nutrients."""

    parser: IngredientLineParser
    lookup: NutrientLookupService
    max_concurrent_lookups: int = 8

    async def calculate(
        self,
        ingredients_text: str,
        servings: int = 4,
        user_id: str | None = None,
    ) -> RecipeNutritionResult:
        """Estimate total and per-serving nutrition for an ingredient list."""
        servings = max(servings, 1)
        lines = split_ingredient_lines(ingredients_text)
        if not lines:
            return RecipeNutritionResult(
                total_nutrition=NutrientVector.zero(),
                per_serving=NutrientVector.zero(),
                servings=servings,
                ingredients_processed=0,
                ingredients_total=0,
            )

        parsed_lines = await self.parser.parse(lines, user_id=user_id)
        semaphore = asyncio.Semaphore(max(self.max_concurrent_lookups, 1))
        contributions = await asyncio.gather(
            *(self._contribution(line, semaphore) for line in parsed_lines)
        )

        total = NutrientVector.zero()
        processed = 0
        skipped: list[SkippedIngredient] = []
        for contribution in contributions:
            if contribution.nutrients is None:
                skipped.append(
                    SkippedIngredient(
                        original_text=contribution.line.original_text,
                        reason=contribution.skip_reason or SkipReason.NOT_FOUND,
                    )
                )
                continue
            total = total + contribution.nutrients
            processed += 1

        _logger.info(
            "Nutrition estimated for %s of %s ingredients", processed, len(lines)
        )
        return RecipeNutritionResult(
            total_nutrition=total.rounded(),
            per_serving=total.scaled(1 / servings).rounded(),
            servings=servings,
            ingredients_processed=processed,
            ingredients_total=len(parsed_lines),
            skipped=tuple(skipped),
        )

    async def _contribution(
        self, line: ParsedIngredientLine, semaphore: asyncio.Semaphore
    ) -> _Contribution:
        if line.quantity <= 0:
            _logger.info("Skipping %r: no quantity", line.original_text)
            return _Contribution(line=line, skip_reason=SkipReason.ZERO_QUANTITY)
        try:
            async with semaphore:
                food = await self.lookup.search(line.search_term)
        except NutrientLookupTimeoutError:
            _logger.warning("Nutrient lookup timed out for %r", line.search_term)
            return _Contribution(line=line, skip_reason=SkipReason.LOOKUP_TIMEOUT)
        except NutrientLookupError as exc:
            _logger.warning("Nutrient lookup failed for %r: %s", line.search_term, exc)
            return _Contribution(line=line, skip_reason=SkipReason.LOOKUP_FAILED)
        if food is None:
            return _Contribution(line=line, skip_reason=SkipReason.NOT_FOUND)
        grams = to_grams(line.quantity, line.unit)
        return _Contribution(
            line=line,
            nutrients=scale_nutrition(food.nutrients, _REFERENCE_GRAMS, grams),
        )
