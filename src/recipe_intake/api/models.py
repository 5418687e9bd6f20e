"""Pydantic models for the HTTP API payloads."""

import base64
import binascii

from pydantic import BaseModel, Field, field_validator, model_validator

from recipe_intake.domain.recipes import ExtractionRequest, ImageBlob


class ImagePayload(BaseModel):
    """Base64-encoded image."""

    data: str
    media_type: str | None = None

    @field_validator("data")
    @classmethod
    def _valid_base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("data must be base64 encoded") from exc
        return value

    def to_blob(self) -> ImageBlob:
        return ImageBlob(data=base64.b64decode(self.data), media_type=self.media_type)


class ExtractRecipeBody(BaseModel):
    """Images of one recipe, in page order, or a text document."""

    images: list[ImagePayload] = Field(default_factory=list)
    text: str | None = None

    @model_validator(mode="after")
    def _images_or_text(self) -> "ExtractRecipeBody":
        if self.images and self.text is not None:
            raise ValueError("Provide images or text, not both")
        return self

    def to_request(self) -> ExtractionRequest:
        if self.text is not None:
            return ExtractionRequest.from_text(self.text)
        return ExtractionRequest.from_images([image.to_blob() for image in self.images])


class NutritionBody(BaseModel):
    """Ingredient text, one ingredient per line."""

    ingredients: str
    servings: int = Field(default=4, ge=1)
