"""Shared test fixtures."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from recipe_intake.adapters.fdc_client import FdcClient
from recipe_intake.config import Settings
from recipe_intake.containers import AppContainer
from recipe_intake.domain.recipes import ImageBlob
from recipe_intake.domain.usage import UsageRecord
from recipe_intake.services.calculator import NutritionCalculator
from recipe_intake.services.extraction import (
    PdfExtractionError,
    PdfTextExtractor,
    RecipeExtractionService,
)
from recipe_intake.services.ingredients import IngredientLineParser
from recipe_intake.services.llm import LanguageModelClient, ModelCompletion
from recipe_intake.services.nutrient_lookup import NutrientLookupService
from recipe_intake.services.usage import UsageLedger, UsageRepository

RECIPE_PAYLOAD: dict[str, object] = {
    "title": "Chocolate Chip Cookies",
    "category": "Dessert",
    "prep_time": 15,
    "cook_time": 12,
    "servings": "24 cookies",
    "ingredients": "2 cups all-purpose flour\n1 cup butter, softened",
    "instructions": "1. Preheat oven to 375F.\n2. Mix and bake.",
    "notes": None,
    "source": "Grandma's recipe book",
    "rating": None,
}

FLOUR_NUTRIENTS = [
    {"nutrientId": 1008, "value": 364},
    {"nutrientId": 1003, "value": 10},
    {"nutrientId": 1004, "value": 1},
    {"nutrientId": 1005, "value": 76},
    {"nutrientId": 1079, "value": 0},
    {"nutrientId": 2000, "value": 0},
    {"nutrientId": 1093, "value": 2},
]

SUGAR_NUTRIENTS = [
    {"nutrientId": 1008, "value": 387},
    {"nutrientId": 1003, "value": 0},
    {"nutrientId": 1004, "value": 0},
    {"nutrientId": 1005, "value": 100},
    {"nutrientId": 1079, "value": 0},
    {"nutrientId": 2000, "value": 100},
    {"nutrientId": 1093, "value": 1},
]


@dataclass
class ModelCall:
    """Arguments of a single fake model call."""

    model: str
    prompt: str
    images: tuple[ImageBlob, ...]
    max_tokens: int
    temperature: float


@dataclass
class FakeModelClient(LanguageModelClient):
    """Fake model client returning queued completions or raising errors."""

    responses: list[str | Exception] = field(default_factory=list)
    model_name: str = "gpt-4o-mini"
    input_tokens: int = 1000
    output_tokens: int = 200
    calls: list[ModelCall] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        images: Sequence[ImageBlob] = (),
        max_tokens: int,
        temperature: float,
    ) -> ModelCompletion:
        self.calls.append(
            ModelCall(
                model=model,
                prompt=prompt,
                images=tuple(images),
                max_tokens=max_tokens,
                temperature=temperature,
            )
        )
        response = self.responses.pop(0) if self.responses else json.dumps({})
        if isinstance(response, Exception):
            raise response
        return ModelCompletion(
            text=response,
            model=self.model_name,
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
        )


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client keyed by search query."""

    foods: dict[str, dict[str, object]] = field(default_factory=dict)
    errors: dict[str, Exception] = field(default_factory=dict)
    queries: list[str] = field(default_factory=list)
    data_types: list[tuple[str, ...]] = field(default_factory=list)

    async def search_foods(
        self,
        query: str,
        page_size: int = 1,
        data_types: Sequence[str] = (),
    ) -> dict[str, object]:
        self.queries.append(query)
        self.data_types.append(tuple(data_types))
        if query in self.errors:
            raise self.errors[query]
        food = self.foods.get(query)
        return {"foods": [food] if food else [], "totalHits": 1 if food else 0}

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        if str(fdc_id) in self.errors:
            raise self.errors[str(fdc_id)]
        for food in self.foods.values():
            if food["fdcId"] == fdc_id:
                return food
        return {"fdcId": fdc_id, "description": "", "foodNutrients": []}


@dataclass
class InMemoryUsageRepository(UsageRepository):
    """In-memory usage repository for tests."""

    records: list[UsageRecord] = field(default_factory=list)

    def append(self, record: UsageRecord) -> None:
        self.records.append(record)

    def list_records(self, user_id: str | None, limit: int) -> list[UsageRecord]:
        matching = [
            record
            for record in self.records
            if user_id is None or record.user_id == user_id
        ]
        return sorted(matching, key=lambda record: record.created_at, reverse=True)[
            :limit
        ]


@dataclass
class FailingUsageRepository(UsageRepository):
    """Usage repository whose writes always fail."""

    def append(self, record: UsageRecord) -> None:
        raise RuntimeError("database unavailable")

    def list_records(self, user_id: str | None, limit: int) -> list[UsageRecord]:
        return []


@dataclass
class FakePdfTextExtractor(PdfTextExtractor):
    """Returns a fixed text or fails for unreadable input."""

    text: str = ""
    calls: int = 0

    def extract_text(self, pdf_bytes: bytes) -> str:
        self.calls += 1
        if not pdf_bytes.startswith(b"%PDF"):
            raise PdfExtractionError("not a PDF")
        return self.text


def fdc_food(fdc_id: int, description: str, nutrients: list[dict[str, object]]):
    return {
        "fdcId": fdc_id,
        "description": description,
        "dataType": "Survey (FNDDS)",
        "foodNutrients": nutrients,
    }


def ingredient_response(items: list[dict[str, object]]) -> str:
    return json.dumps(items)


@pytest.fixture(autouse=True)
def _propagate_app_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logging.getLogger("recipe_intake"), "propagate", True)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
        openai_api_key="openai-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def usage_repository() -> InMemoryUsageRepository:
    return InMemoryUsageRepository()


@pytest.fixture
def ledger(usage_repository: InMemoryUsageRepository) -> UsageLedger:
    return UsageLedger(usage_repository)


@pytest.fixture
def model_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient(
        foods={
            "flour": fdc_food(1001, "Flour, wheat, all-purpose", FLOUR_NUTRIENTS),
            "sugar": fdc_food(1002, "Sugar, granulated", SUGAR_NUTRIENTS),
        }
    )


@pytest.fixture
def pdf_extractor() -> FakePdfTextExtractor:
    return FakePdfTextExtractor(text="Pancakes\n1 cup flour\nMix and fry.")


@pytest.fixture
def extraction_service(
    model_client: FakeModelClient,
    ledger: UsageLedger,
    pdf_extractor: FakePdfTextExtractor,
) -> RecipeExtractionService:
    return RecipeExtractionService(
        client=model_client,
        model="gpt-4o-mini",
        ledger=ledger,
        pdf_extractor=pdf_extractor,
    )


@pytest.fixture
def calculator(
    model_client: FakeModelClient,
    ledger: UsageLedger,
    fdc_client: FakeFdcClient,
) -> NutritionCalculator:
    return NutritionCalculator(
        parser=IngredientLineParser(
            client=model_client, model="gpt-4o-mini", ledger=ledger
        ),
        lookup=NutrientLookupService(fdc_client=fdc_client),
    )


@pytest.fixture
def container(
    settings: Settings,
    ledger: UsageLedger,
    extraction_service: RecipeExtractionService,
    calculator: NutritionCalculator,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        usage_ledger=ledger,
        extraction_service=extraction_service,
        nutrition_calculator=calculator,
        close_resources=close_resources,
    )
