"""Append-only ledger of model usage and cost."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol

from recipe_intake.domain.usage import (
    DailyUsage,
    ServiceUsage,
    UsageContext,
    UsageRecord,
    UsageReport,
    UsageSummary,
)

_logger = logging.getLogger(__name__)


class UsageRepository(Protocol):
    """Persistence interface for usage records."""

    def append(self, record: UsageRecord) -> None:
        """Persist a usage record."""

    def list_records(self, user_id: str | None, limit: int) -> list[UsageRecord]:
        """Return usage records, newest first, optionally for one user."""


@dataclass
class UsageLedger:
    """Records the cost of every model call that actually happened."""

    repository: UsageRepository
    recent_limit: int = 10
    summary_limit: int = 1000

    def record(self, report: UsageReport, context: UsageContext) -> UsageRecord | None:
        """Append a usage record; write failures are logged, never raised."""
        record = UsageRecord(
            user_id=context.user_id,
            service=context.service,
            operation=context.operation,
            model=report.model,
            input_tokens=report.input_tokens,
            output_tokens=report.output_tokens,
            total_tokens=report.total_tokens,
            estimated_cost=report.estimated_cost,
            created_at=datetime.now(tz=UTC),
        )
        try:
            self.repository.append(record)
        except Exception:
            _logger.exception(
                "Failed to record usage: service=%s operation=%s tokens=%s",
                context.service,
                context.operation,
                report.total_tokens,
            )
            return None
        return record

    def list_records(
        self, user_id: str | None = None, limit: int = 30
    ) -> list[UsageRecord]:
        """Return stored usage records, newest first."""
        return self.repository.list_records(user_id, limit)

    def summarize(self, user_id: str | None = None) -> UsageSummary:
        """Aggregate stored usage by service and by day."""
        records = self.repository.list_records(user_id, self.summary_limit)
        by_service: dict[str, ServiceUsage] = {}
        by_day: dict[date, DailyUsage] = {}
        for record in records:
            current = by_service.get(record.service, ServiceUsage(0, 0.0, 0))
            by_service[record.service] = ServiceUsage(
                count=current.count + 1,
                total_cost=current.total_cost + record.estimated_cost,
                total_tokens=current.total_tokens + record.total_tokens,
            )
            day = record.created_at.astimezone(UTC).date()
            daily = by_day.get(day, DailyUsage(day=day, count=0, cost=0.0))
            by_day[day] = DailyUsage(
                day=day, count=daily.count + 1, cost=daily.cost + record.estimated_cost
            )
        return UsageSummary(
            total_cost=sum(record.estimated_cost for record in records),
            total_tokens=sum(record.total_tokens for record in records),
            total_imports=sum(1 for record in records if "import" in record.operation),
            by_service=by_service,
            by_day=sorted(by_day.values(), key=lambda item: item.day, reverse=True),
            recent=records[: self.recent_limit],
        )
