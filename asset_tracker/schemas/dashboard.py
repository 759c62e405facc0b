"""
Фильтр и результат дашборда. Роутер парсит query-параметры в DashboardFilter
и передаёт в metrics_service.
"""
from datetime import date

from pydantic import BaseModel

from asset_tracker.schemas.records import PurchaseOut, TransferOut


class DateRange(BaseModel):
    """Календарные даты, обе границы включительно."""
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class DashboardFilter(BaseModel):
    date_range: DateRange
    base_id: str | None = None
    equipment_type_id: str | None = None


class NetMovementBreakdown(BaseModel):
    """Списки записей, из которых получены итоги (для детализации по клику)."""
    purchases: list[PurchaseOut]
    transfers_in: list[TransferOut]
    transfers_out: list[TransferOut]
    total_purchases: int
    total_transfers_in: int
    total_transfers_out: int
    net_movement: int


class DashboardMetrics(BaseModel):
    opening_balance: int
    closing_balance: int
    net_movement: int
    assigned_assets: int
    expended_assets: int
    net_movement_breakdown: NetMovementBreakdown
