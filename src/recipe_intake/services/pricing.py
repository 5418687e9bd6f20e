"""Static model price table and usage report construction."""

import logging

from recipe_intake.domain.usage import UsageReport

_logger = logging.getLogger(__name__)

_PER_MILLION = 1_000_000

# USD per million (input, output) tokens, keyed by model name prefix.
MODEL_PRICES: dict[str, tuple[float, float]] = {
    "gemini-2.0-flash": (0.075, 0.30),
    "gpt-4o-mini": (0.15, 0.60),
    "gpt-4o": (2.50, 10.00),
    "gpt-4.1-mini": (0.40, 1.60),
    "gpt-4.1": (2.00, 8.00),
    "claude-3-5-haiku": (0.80, 4.00),
    "claude-haiku-4": (1.00, 5.00),
    "claude-sonnet-4": (3.00, 15.00),
    "claude-opus-4": (15.00, 75.00),
}


def price_for(model: str) -> tuple[float, float] | None:
    """Return per-token (input, output) prices using the longest matching prefix."""
    matches = [prefix for prefix in MODEL_PRICES if model.startswith(prefix)]
    if not matches:
        return None
    price_in, price_out = MODEL_PRICES[max(matches, key=len)]
    return price_in / _PER_MILLION, price_out / _PER_MILLION


def build_usage_report(
    model: str, input_tokens: int, output_tokens: int
) -> UsageReport:
    """Cost a model call from its token counts."""
    input_tokens = max(input_tokens, 0)
    output_tokens = max(output_tokens, 0)
    prices = price_for(model)
    if prices is None:
        _logger.warning("No price configured for model %s; cost recorded as 0", model)
        estimated_cost = 0.0
    else:
        price_in, price_out = prices
        estimated_cost = input_tokens * price_in + output_tokens * price_out
    return UsageReport(
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=input_tokens + output_tokens,
        estimated_cost=estimated_cost,
    )
