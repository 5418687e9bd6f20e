"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from recipe_intake.containers import AppContainer
    from recipe_intake.domain.usage import UsageRecord

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/usage", dependencies=[Depends(require_admin)])
async def usage_summary(
    request: Request, user_id: str | None = None
) -> dict[str, object]:
    """Return model usage totals grouped by service and day."""
    container: AppContainer = request.app.state.container
    summary = container.usage_ledger.summarize(user_id)
    return {
        "total_cost": summary.total_cost,
        "total_tokens": summary.total_tokens,
        "total_imports": summary.total_imports,
        "by_service": {
            service: asdict(usage) for service, usage in summary.by_service.items()
        },
        "by_day": [
            {"day": item.day.isoformat(), "count": item.count, "cost": item.cost}
            for item in summary.by_day
        ],
        "recent": [_serialize_record(record) for record in summary.recent],
    }


@router.get("/usage/records", dependencies=[Depends(require_admin)])
async def usage_records(
    request: Request, user_id: str | None = None, limit: int = 30
) -> dict[str, object]:
    """Return recent model usage records."""
    container: AppContainer = request.app.state.container
    records = container.usage_ledger.list_records(user_id, limit)
    return {"usage": [_serialize_record(record) for record in records]}


def _serialize_record(record: UsageRecord) -> dict[str, object]:
    payload = asdict(record)
    payload["created_at"] = record.created_at.isoformat()
    return payload
