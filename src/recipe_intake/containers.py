"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from recipe_intake.adapters.anthropic_model_client import AnthropicModelClient
from recipe_intake.adapters.fdc_client import HttpxFdcClient
from recipe_intake.adapters.openai_model_client import OpenAIModelClient
from recipe_intake.adapters.pypdf_text_extractor import PypdfTextExtractor
from recipe_intake.adapters.supabase_usage_repository import SupabaseUsageRepository
from recipe_intake.config import Settings
from recipe_intake.services.calculator import NutritionCalculator
from recipe_intake.services.extraction import RecipeExtractionService
from recipe_intake.services.ingredients import IngredientLineParser
from recipe_intake.services.nutrient_lookup import NutrientLookupService
from recipe_intake.services.usage import UsageLedger


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    usage_ledger: UsageLedger
    extraction_service: RecipeExtractionService
    nutrition_calculator: NutritionCalculator
    close_resources: Callable[[], Awaitable[None]]


def _build_model_client(
    settings: Settings,
) -> OpenAIModelClient | AnthropicModelClient:
    if settings.llm_provider == "anthropic":
        if not settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY is required for the anthropic provider")
        return AnthropicModelClient.create(
            settings.anthropic_api_key, settings.llm_timeout_seconds
        )
    if settings.llm_provider == "openai":
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required for the openai provider")
        return OpenAIModelClient.create(
            settings.openai_api_key, settings.llm_timeout_seconds
        )
    raise ValueError(f"Unknown LLM provider: {settings.llm_provider}")


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    extraction_model, ingredient_model = resolved_settings.resolved_models()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    usage_ledger = UsageLedger(SupabaseUsageRepository(supabase_client))
    model_client = _build_model_client(resolved_settings)
    extraction_service = RecipeExtractionService(
        client=model_client,
        model=extraction_model,
        ledger=usage_ledger,
        pdf_extractor=PypdfTextExtractor(),
        max_tokens=resolved_settings.extraction_max_tokens,
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.fdc_timeout_seconds,
    )
    nutrition_calculator = NutritionCalculator(
        parser=IngredientLineParser(
            client=model_client,
            model=ingredient_model,
            ledger=usage_ledger,
            max_tokens=resolved_settings.ingredient_max_tokens,
        ),
        lookup=NutrientLookupService(
            fdc_client=fdc_client,
            data_type=resolved_settings.fdc_data_type,
        ),
        max_concurrent_lookups=resolved_settings.max_concurrent_lookups,
    )

    async def close_resources() -> None:
        await model_client.close()
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        usage_ledger=usage_ledger,
        extraction_service=extraction_service,
        nutrition_calculator=nutrition_calculator,
        close_resources=close_resources,
    )
