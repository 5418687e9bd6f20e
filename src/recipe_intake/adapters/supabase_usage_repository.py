"""Supabase repository for model usage records."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from recipe_intake.domain.usage import UsageRecord
from recipe_intake.services.usage import UsageRepository


@dataclass
class SupabaseUsageRepository(UsageRepository):
    """Supabase-backed usage ledger storage."""

    client: Client
    table_name: str = "api_usage"

    def append(self, record: UsageRecord) -> None:
        """Insert a usage row."""
        self.client.table(self.table_name).insert(
            {
                "user_id": record.user_id,
                "service": record.service,
                "operation": record.operation,
                "model": record.model,
                "input_tokens": record.input_tokens,
                "output_tokens": record.output_tokens,
                "total_tokens": record.total_tokens,
                "estimated_cost": record.estimated_cost,
                "created_at": record.created_at.isoformat(),
            }
        ).execute()

    def list_records(self, user_id: str | None, limit: int) -> list[UsageRecord]:
        """Return usage rows ordered by creation time, newest first."""
        query = self.client.table(self.table_name).select("*")
        if user_id is not None:
            query = query.eq("user_id", user_id)
        response = query.order("created_at", desc=True).limit(limit).execute()
        return [_to_record(row) for row in response.data or []]


def _to_record(row: dict[str, object]) -> UsageRecord:
    return UsageRecord(
        user_id=row.get("user_id"),
        service=str(row.get("service") or ""),
        operation=str(row.get("operation") or ""),
        model=str(row.get("model") or ""),
        input_tokens=int(row.get("input_tokens") or 0),
        output_tokens=int(row.get("output_tokens") or 0),
        total_tokens=int(row.get("total_tokens") or 0),
        estimated_cost=float(row.get("estimated_cost") or 0.0),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
