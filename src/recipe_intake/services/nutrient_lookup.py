"""Nutrient lookups against USDA FoodData Central."""

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from recipe_intake.adapters.fdc_client import FdcClient
from recipe_intake.domain.nutrition import FoodRecord, NutrientVector

# FDC nutrient id -> NutrientVector field.
NUTRIENT_IDS: dict[int, str] = {
    1008: "calories",
    1003: "protein_g",
    1004: "fat_g",
    1005: "carbs_g",
    1079: "fiber_g",
    2000: "sugar_g",
    1093: "sodium_mg",
}

COMMON_FOODS_DATA_TYPE = "Survey (FNDDS)"

_logger = logging.getLogger(__name__)


class NutrientLookupError(Exception):
    """The nutrient database request failed."""


class NutrientLookupTimeoutError(NutrientLookupError):
    """The nutrient database did not answer in time."""


@dataclass
class NutrientLookupService:
    """Finds the first common-food match for a search term."""

    fdc_client: FdcClient
    data_type: str = COMMON_FOODS_DATA_TYPE
    retry_attempts: int = 0
    retry_delay_seconds: float = 0.3

    async def search(self, term: str) -> FoodRecord | None:
        """Return the top match for ``term`` or ``None`` when nothing matches."""
        query = term.strip()
        if not query:
            return None
        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(
                query, page_size=1, data_types=(self.data_type,)
            ),
            action=f"search:{query}",
        )
        foods = (payload.get("foods") or []) if isinstance(payload, dict) else None
        if not isinstance(foods, list):
            raise NutrientLookupError(f"search:{query} returned a malformed body")
        if not foods:
            _logger.info("No FDC match for %r", query)
            return None
        return _to_food_record(foods[0])

    async def get_food(self, fdc_id: int) -> FoodRecord:
        """Fetch a single food record by its FDC id."""
        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        return _to_food_record(payload)

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        """Call the FDC client, retrying transport errors when configured."""
        attempt = 0
        while True:
            try:
                return await func()
            except httpx.TimeoutException as exc:
                attempt += 1
                if attempt > self.retry_attempts:
                    raise NutrientLookupTimeoutError(f"{action} timed out") from exc
                _logger.warning(
                    "Nutrient %s timed out (attempt %s/%s)",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                )
            except httpx.TransportError as exc:
                attempt += 1
                if attempt > self.retry_attempts:
                    raise NutrientLookupError(f"{action} failed: {exc}") from exc
                _logger.warning(
                    "Nutrient %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
            except httpx.HTTPStatusError as exc:
                raise NutrientLookupError(
                    f"{action} failed with status {exc.response.status_code}"
                ) from exc
            except ValueError as exc:
                raise NutrientLookupError(f"{action} returned invalid JSON") from exc
            await asyncio.sleep(self.retry_delay_seconds)


def _to_food_record(food: object) -> FoodRecord:
    if not isinstance(food, dict):
        raise NutrientLookupError("FDC food is not an object")
    try:
        fdc_id = int(food["fdcId"])
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise NutrientLookupError("FDC food is missing a valid fdcId") from exc
    try:
        nutrients = extract_nutrients(food.get("foodNutrients") or [])
    except (AttributeError, TypeError) as exc:
        raise NutrientLookupError(
            f"FDC food {fdc_id} has malformed nutrients"
        ) from exc
    data_type = food.get("dataType")
    return FoodRecord(
        fdc_id=fdc_id,
        description=str(food.get("description") or ""),
        data_type=str(data_type) if data_type is not None else None,
        nutrients=nutrients,
    )


def extract_nutrients(food_nutrients: list[dict[str, object]]) -> NutrientVector:
    """Map FDC nutrient entries onto a per-100 g vector; missing ones stay 0."""
    values: dict[str, float] = {}
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient.get("nutrientId") or nutrient_info.get("id")
        field_name = NUTRIENT_IDS.get(nutrient_id)
        if field_name is None:
            continue
        amount = nutrient.get("value")
        if amount is None:
            amount = nutrient.get("amount")
        try:
            value = float(amount) if amount is not None else 0.0
        except (TypeError, ValueError):
            value = 0.0
        values[field_name] = max(value, 0.0) if math.isfinite(value) else 0.0
    return NutrientVector(**values)
