"""Nutrition domain models."""

from dataclasses import dataclass, fields
from enum import StrEnum


@dataclass(frozen=True)
class NutrientVector:
    """Fixed set of tracked nutrients for an amount of food."""

    calories: float = 0.0
    protein_g: float = 0.0
    fat_g: float = 0.0
    carbs_g: float = 0.0
    fiber_g: float = 0.0
    sugar_g: float = 0.0
    sodium_mg: float = 0.0

    @classmethod
    def zero(cls) -> "NutrientVector":
        """Return a vector with every nutrient set to zero."""
        return cls()

    def scaled(self, factor: float) -> "NutrientVector":
        """Return a copy with every nutrient multiplied by ``factor``."""
        return NutrientVector(
            **{item.name: getattr(self, item.name) * factor for item in fields(self)}
        )

    def __add__(self, other: "NutrientVector") -> "NutrientVector":
        if not isinstance(other, NutrientVector):
            return NotImplemented
        return NutrientVector(
            **{
                item.name: getattr(self, item.name) + getattr(other, item.name)
                for item in fields(self)
            }
        )

    def rounded(self) -> "NutrientVector":
        """Round for display: grams to 0.1, calories and sodium to integers."""
        return NutrientVector(
            calories=round(self.calories),
            protein_g=round(self.protein_g, 1),
            fat_g=round(self.fat_g, 1),
            carbs_g=round(self.carbs_g, 1),
            fiber_g=round(self.fiber_g, 1),
            sugar_g=round(self.sugar_g, 1),
            sodium_mg=round(self.sodium_mg),
        )

    def as_dict(self) -> dict[str, float]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


@dataclass(frozen=True)
class FoodRecord:
    """A food from the composition database with per-100 g nutrients."""

    fdc_id: int
    description: str
    data_type: str | None
    nutrients: NutrientVector


@dataclass(frozen=True)
class ParsedIngredientLine:
    """One ingredient line decomposed into quantity, unit and names."""

    original_text: str
    quantity: float
    unit: str
    canonical_name: str
    search_term: str

    @classmethod
    def unparsed(cls, text: str) -> "ParsedIngredientLine":
        """Fallback for a line the model could not parse."""
        return cls(
            original_text=text,
            quantity=0.0,
            unit="",
            canonical_name=text,
            search_term=text,
        )


class SkipReason(StrEnum):
    """Why an ingredient line did not contribute to the totals."""

    ZERO_QUANTITY = "ZERO_QUANTITY"
    NOT_FOUND = "NOT_FOUND"
    LOOKUP_TIMEOUT = "LOOKUP_TIMEOUT"
    LOOKUP_FAILED = "LOOKUP_FAILED"


@dataclass(frozen=True)
class SkippedIngredient:
    """Ingredient line excluded from the nutrition totals."""

    original_text: str
    reason: SkipReason


@dataclass(frozen=True)
class RecipeNutritionResult:
    """Total and per-serving nutrition for a recipe."""

    total_nutrition: NutrientVector
    per_serving: NutrientVector
    servings: int
    ingredients_processed: int
    ingredients_total: int
    skipped: tuple[SkippedIngredient, ...] = ()
