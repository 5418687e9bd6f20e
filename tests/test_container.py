"""Tests for container wiring."""

import asyncio

import pytest

from recipe_intake.adapters.anthropic_model_client import AnthropicModelClient
from recipe_intake.adapters.openai_model_client import OpenAIModelClient
from recipe_intake.config import Settings
from recipe_intake.containers import build_container


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.extraction_service.client, OpenAIModelClient)
    assert container.extraction_service.model == "gpt-4o-mini"
    assert container.nutrition_calculator.parser.model == "gpt-4o-mini"
    assert container.nutrition_calculator.max_concurrent_lookups == 8
    assert container.extraction_service.pdf_extractor is not None
    asyncio.run(container.close_resources())


def test_anthropic_provider_uses_its_default_models(settings: Settings) -> None:
    anthropic_settings = settings.model_copy(
        update={"llm_provider": "anthropic", "anthropic_api_key": "anthropic-key"}
    )

    container = build_container(anthropic_settings)

    assert isinstance(container.extraction_service.client, AnthropicModelClient)
    assert container.extraction_service.model.startswith("claude-sonnet-4")
    assert container.nutrition_calculator.parser.model.startswith("claude-3-5-haiku")
    asyncio.run(container.close_resources())


def test_model_overrides_win_over_provider_defaults(settings: Settings) -> None:
    overridden = settings.model_copy(
        update={"extraction_model": "gpt-4.1", "ingredient_model": "gpt-4.1-mini"}
    )

    assert overridden.resolved_models() == ("gpt-4.1", "gpt-4.1-mini")


def test_missing_provider_key_is_rejected(settings: Settings) -> None:
    without_key = settings.model_copy(
        update={"llm_provider": "anthropic", "anthropic_api_key": None}
    )

    with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
        build_container(without_key)


def test_unknown_provider_is_rejected(settings: Settings) -> None:
    with pytest.raises(ValueError, match="Unknown LLM provider"):
        settings.model_copy(update={"llm_provider": "gemini"}).resolved_models()
