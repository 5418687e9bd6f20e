"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Header, HTTPException, Request, status

from recipe_intake.api.admin import router as admin_router
from recipe_intake.api.models import ExtractRecipeBody, NutritionBody
from recipe_intake.app_logging import configure_logging
from recipe_intake.containers import AppContainer
from recipe_intake.domain.nutrition import FoodRecord, RecipeNutritionResult
from recipe_intake.domain.recipes import ExtractionOutcome, ExtractionSuccess
from recipe_intake.domain.usage import UsageReport
from recipe_intake.services.calculator import health_indicator
from recipe_intake.services.nutrient_lookup import (
    NutrientLookupError,
    NutrientLookupTimeoutError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close upstream clients")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/recipes/extract")
    async def extract_recipe(
        body: ExtractRecipeBody,
        request: Request,
        x_user_id: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Extract a draft recipe from images or text."""
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.extraction_service.extract(
            body.to_request(), user_id=x_user_id
        )
        return _serialize_outcome(outcome)

    @app.post("/recipes/extract/pdf")
    async def extract_recipe_from_pdf(
        request: Request,
        x_user_id: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Extract a draft recipe from a raw PDF request body."""
        state_container: AppContainer = request.app.state.container
        pdf_bytes = await request.body()
        outcome = await state_container.extraction_service.extract_from_pdf(
            pdf_bytes, user_id=x_user_id
        )
        return _serialize_outcome(outcome)

    @app.post("/nutrition")
    async def calculate_nutrition(
        body: NutritionBody,
        request: Request,
        x_user_id: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Estimate total and per-serving nutrition for an ingredient list."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.nutrition_calculator.calculate(
            body.ingredients, servings=body.servings, user_id=x_user_id
        )
        return _serialize_nutrition(result)

    @app.get("/foods/{fdc_id}")
    async def get_food(fdc_id: int, request: Request) -> dict[str, object]:
        """Return per-100 g nutrients for a FoodData Central food."""
        state_container: AppContainer = request.app.state.container
        lookup = state_container.nutrition_calculator.lookup
        try:
            food = await lookup.get_food(fdc_id)
        except NutrientLookupTimeoutError as exc:
            raise HTTPException(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc)
            ) from exc
        except NutrientLookupError as exc:
            logger.warning("Food lookup failed for %s: %s", fdc_id, exc)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return _serialize_food(food)

    return app


def _serialize_usage(usage: UsageReport) -> dict[str, object]:
    return asdict(usage)


def _serialize_outcome(outcome: ExtractionOutcome) -> dict[str, object]:
    if isinstance(outcome, ExtractionSuccess):
        return {
            "status": "success",
            "recipe": outcome.recipe.model_dump(mode="json"),
            "confidence": outcome.confidence,
            "usage": _serialize_usage(outcome.usage),
        }
    return {
        "status": "failure",
        "reason": outcome.reason.value,
        "detail": outcome.detail,
        "usage": _serialize_usage(outcome.usage),
    }


def _serialize_nutrition(result: RecipeNutritionResult) -> dict[str, object]:
    return {
        "total_nutrition": result.total_nutrition.as_dict(),
        "per_serving": result.per_serving.as_dict(),
        "per_serving_health": {
            name: health_indicator(name, value).value
            for name, value in result.per_serving.as_dict().items()
        },
        "servings": result.servings,
        "ingredients_processed": result.ingredients_processed,
        "ingredients_total": result.ingredients_total,
        "skipped": [
            {"original_text": item.original_text, "reason": item.reason.value}
            for item in result.skipped
        ],
    }


def _serialize_food(food: FoodRecord) -> dict[str, object]:
    return {
        "fdc_id": food.fdc_id,
        "description": food.description,
        "data_type": food.data_type,
        "nutrients": food.nutrients.as_dict(),
    }
