"""Domain models for model usage accounting."""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class UsageReport:
    """Token counts and estimated cost of a single model call."""

    model: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    estimated_cost: float

    @classmethod
    def zero(cls, model: str = "") -> "UsageReport":
        return cls(
            model=model,
            input_tokens=0,
            output_tokens=0,
            total_tokens=0,
            estimated_cost=0.0,
        )


@dataclass(frozen=True)
class UsageContext:
    """Who triggered a model call and for what."""

    user_id: str | None
    service: str
    operation: str


@dataclass(frozen=True)
class UsageRecord:
    """Usage report tagged for persistence."""

    user_id: str | None
    service: str
    operation: str
    model: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    estimated_cost: float
    created_at: datetime


@dataclass(frozen=True)
class ServiceUsage:
    """Aggregated usage for one service."""

    count: int
    total_cost: float
    total_tokens: int


@dataclass(frozen=True)
class DailyUsage:
    """Aggregated usage for one UTC day."""

    day: date
    count: int
    cost: float


@dataclass(frozen=True)
class UsageSummary:
    """Usage statistics over a set of records."""

    total_cost: float
    total_tokens: int
    total_imports: int
    by_service: dict[str, ServiceUsage] = field(default_factory=dict)
    by_day: list[DailyUsage] = field(default_factory=list)
    recent: list[UsageRecord] = field(default_factory=list)
