from datetime import UTC, date, datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.auth import require_user
from asset_tracker.database import get_db
from asset_tracker.models import User
from asset_tracker.schemas.dashboard import (
    DashboardFilter,
    DashboardMetrics,
    DateRange,
    NetMovementBreakdown,
)
from asset_tracker.services import metrics_service
from asset_tracker.services.report_service import build_dashboard_xlsx
from asset_tracker.utils.clock import today

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _filters_from_query(
    start: date | None = Query(None),
    end: date | None = Query(None),
    base_id: str | None = Query(None),
    equipment_type_id: str | None = Query(None),
) -> DashboardFilter:
    """Пустые даты — период по умолчанию (последние 30 дней)."""
    default = metrics_service.default_filters(today())
    return DashboardFilter(
        date_range=DateRange(
            start=start or default.date_range.start,
            end=end or default.date_range.end,
        ),
        base_id=base_id or None,
        equipment_type_id=equipment_type_id or None,
    )


@router.get("", name="dashboard", response_model=DashboardMetrics)
async def dashboard(
    filters: DashboardFilter = Depends(_filters_from_query),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await metrics_service.get_dashboard_metrics(db, filters, current_user)


@router.get("/net-movement", name="net_movement", response_model=NetMovementBreakdown)
async def net_movement(
    filters: DashboardFilter = Depends(_filters_from_query),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    metrics = await metrics_service.get_dashboard_metrics(db, filters, current_user)
    return metrics.net_movement_breakdown


@router.get("/export.xlsx", name="dashboard_export")
async def dashboard_export(
    filters: DashboardFilter = Depends(_filters_from_query),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    metrics = await metrics_service.get_dashboard_metrics(db, filters, current_user)
    buf = build_dashboard_xlsx(
        metrics,
        filters,
        generated_by=current_user.username,
        generated_at=datetime.now(UTC),
    )
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=dashboard.xlsx"},
    )
