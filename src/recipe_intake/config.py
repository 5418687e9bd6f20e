"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_MODELS: dict[str, tuple[str, str]] = {
    # provider: (extraction model, ingredient parsing model)
    "openai": ("gpt-4o-mini", "gpt-4o-mini"),
    "anthropic": ("claude-sonnet-4-20250514", "claude-3-5-haiku-20241022"),
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    llm_provider: str = "openai"
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    extraction_model: str | None = None
    ingredient_model: str | None = None
    llm_timeout_seconds: float = 60.0
    extraction_max_tokens: int = 2048
    ingredient_max_tokens: int = 2048
    fdc_api_key: str = "DEMO_KEY"
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    fdc_timeout_seconds: float = 15.0
    fdc_data_type: str = "Survey (FNDDS)"
    max_concurrent_lookups: int = 8
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def resolved_models(self) -> tuple[str, str]:
        """Return (extraction, ingredient) model names for the provider."""
        try:
            default_extraction, default_ingredient = DEFAULT_MODELS[self.llm_provider]
        except KeyError as exc:
            raise ValueError(f"Unknown LLM provider: {self.llm_provider}") from exc
        return (
            self.extraction_model or default_extraction,
            self.ingredient_model or default_ingredient,
        )
