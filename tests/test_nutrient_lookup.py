"""Tests for nutrient lookups."""

import asyncio

import httpx
import pytest

from recipe_intake.services.nutrient_lookup import (
    NutrientLookupError,
    NutrientLookupService,
    NutrientLookupTimeoutError,
    extract_nutrients,
)
from tests.conftest import FakeFdcClient


def test_search_returns_first_match_with_nutrients(
    fdc_client: FakeFdcClient,
) -> None:
    service = NutrientLookupService(fdc_client=fdc_client)

    food = asyncio.run(service.search("  flour "))

    assert food is not None
    assert food.fdc_id == 1001
    assert food.nutrients.calories == 364
    assert food.nutrients.carbs_g == 76
    assert fdc_client.queries == ["flour"]
    assert fdc_client.data_types == [("Survey (FNDDS)",)]


def test_search_returns_none_without_match(fdc_client: FakeFdcClient) -> None:
    service = NutrientLookupService(fdc_client=fdc_client)

    assert asyncio.run(service.search("dragonfruit powder")) is None


def test_blank_term_skips_the_request(fdc_client: FakeFdcClient) -> None:
    service = NutrientLookupService(fdc_client=fdc_client)

    assert asyncio.run(service.search("   ")) is None
    assert fdc_client.queries == []


def test_timeout_is_reported_as_lookup_timeout() -> None:
    client = FakeFdcClient(errors={"salt": httpx.ReadTimeout("slow")})
    service = NutrientLookupService(fdc_client=client)

    with pytest.raises(NutrientLookupTimeoutError):
        asyncio.run(service.search("salt"))


def test_transport_errors_are_retried_when_configured() -> None:
    client = FakeFdcClient(errors={"salt": httpx.ConnectError("refused")})
    service = NutrientLookupService(
        fdc_client=client, retry_attempts=2, retry_delay_seconds=0
    )

    with pytest.raises(NutrientLookupError):
        asyncio.run(service.search("salt"))

    assert client.queries == ["salt", "salt", "salt"]


def test_get_food_by_id(fdc_client: FakeFdcClient) -> None:
    service = NutrientLookupService(fdc_client=fdc_client)

    food = asyncio.run(service.get_food(1002))

    assert food.description == "Sugar, granulated"
    assert food.nutrients.sugar_g == 100


def test_extract_nutrients_accepts_nested_ids_and_amounts() -> None:
    vector = extract_nutrients(
        [
            {"nutrient": {"id": 1008}, "amount": 165},
            {"nutrientId": 1003, "value": 31},
            {"nutrientId": 1093, "value": -4},
            {"nutrientId": 9999, "value": 12},
            {"nutrientId": 1004},
        ]
    )

    assert vector.calories == 165
    assert vector.protein_g == 31
    assert vector.sodium_mg == 0
    assert vector.fat_g == 0


@pytest.mark.parametrize(
    "food",
    [
        "not-a-food",
        {"fdcId": 5, "foodNutrients": ["oops"]},
        {"fdcId": 5, "foodNutrients": [{"nutrient": "energy", "value": 1}]},
        {"fdcId": 5, "foodNutrients": 12},
        {"fdcId": 1e400},
    ],
)
def test_malformed_food_raises_lookup_error(food: object) -> None:
    client = FakeFdcClient(foods={"odd": food})  # type: ignore[dict-item]
    service = NutrientLookupService(fdc_client=client)

    with pytest.raises(NutrientLookupError):
        asyncio.run(service.search("odd"))


def test_non_finite_nutrient_values_count_as_zero() -> None:
    vector = extract_nutrients(
        [
            {"nutrientId": 1008, "value": float("inf")},
            {"nutrientId": 1003, "value": float("nan")},
            {"nutrientId": 1005, "value": "12.5"},
        ]
    )

    assert vector.calories == 0
    assert vector.protein_g == 0
    assert vector.carbs_g == 12.5
