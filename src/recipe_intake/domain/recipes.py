"""Models for recipe extraction requests and results."""

import math
import re
from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from recipe_intake.domain.usage import UsageReport

_LEADING_INT = re.compile(r"^\s*(\d+)")


class RecipeCategory(StrEnum):
    """Dish categories a recipe can be filed under."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    DESSERT = "Dessert"
    APPETIZER = "Appetizer"
    SNACK = "Snack"
    BEVERAGE = "Beverage"
    SALAD = "Salad"
    SOUP = "Soup"
    SIDE_DISH = "Side Dish"
    MAIN_COURSE = "Main Course"
    BAKING = "Baking"
    OTHER = "Other"


class ExtractedRecipe(BaseModel):
    """Draft recipe extracted by a model. Every field may be missing."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = None
    category: RecipeCategory | None = None
    prep_time_minutes: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("prep_time_minutes", "prep_time"),
    )
    cook_time_minutes: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("cook_time_minutes", "cook_time"),
    )
    servings: str | None = None
    ingredients: str | None = None
    instructions: str | None = None
    notes: str | None = None
    source: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)

    @field_validator("title", "notes", "source", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str | None:
        return _clean_text(value)

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def _coerce_lines(cls, value: object) -> str | None:
        if isinstance(value, list):
            value = "\n".join(str(item).strip() for item in value if item is not None)
        return _clean_text(value)

    @field_validator("servings", mode="before")
    @classmethod
    def _coerce_servings(cls, value: object) -> str | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return _clean_text(value)

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: object) -> RecipeCategory | None:
        if not isinstance(value, str):
            return None
        wanted = value.strip().lower()
        for category in RecipeCategory:
            if category.value.lower() == wanted:
                return category
        return None

    @field_validator("prep_time_minutes", "cook_time_minutes", mode="before")
    @classmethod
    def _coerce_minutes(cls, value: object) -> int | None:
        minutes = _to_int(value)
        if minutes is None or minutes < 0:
            return None
        return minutes

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: object) -> int | None:
        rating = _to_int(value)
        if rating is None or not 1 <= rating <= 5:  # noqa: PLR2004
            return None
        return rating


def _clean_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_int(value: object) -> int | None:
    """Best-effort integer coercion for model-provided numbers."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return round(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


def detect_media_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"


@dataclass(frozen=True)
class ImageBlob:
    """Binary image with its media type."""

    data: bytes
    media_type: str | None = None

    @property
    def resolved_media_type(self) -> str:
        return self.media_type or detect_media_type(self.data)


@dataclass(frozen=True)
class ExtractionRequest:
    """Either an ordered set of images or a text document to extract from."""

    images: tuple[ImageBlob, ...] = ()
    text: str | None = None

    def __post_init__(self) -> None:
        if self.images and self.text is not None:
            raise ValueError("ExtractionRequest takes images or text, not both")

    @classmethod
    def from_images(cls, images: list[ImageBlob]) -> "ExtractionRequest":
        return cls(images=tuple(images))

    @classmethod
    def from_text(cls, text: str) -> "ExtractionRequest":
        return cls(text=text)


class ExtractionFailureReason(StrEnum):
    """Request-level extraction failures."""

    NO_CONTENT = "NO_CONTENT"
    MODEL_UNAVAILABLE = "MODEL_UNAVAILABLE"
    MODEL_TIMEOUT = "MODEL_TIMEOUT"
    UNPARSEABLE = "UNPARSEABLE"


class PromptVariant(StrEnum):
    """Instruction template used for an extraction call."""

    SINGLE = "single"
    MULTI_PAGE = "multi_page"
    TEXT = "text"


@dataclass(frozen=True)
class ExtractionSuccess:
    """Draft recipe with the fraction of core fields that were found."""

    recipe: ExtractedRecipe
    confidence: float
    usage: UsageReport


@dataclass(frozen=True)
class ExtractionFailure:
    """Extraction that produced no recipe."""

    reason: ExtractionFailureReason
    usage: UsageReport = field(default_factory=UsageReport.zero)
    detail: str | None = None


ExtractionOutcome = ExtractionSuccess | ExtractionFailure
