"""
Расчёт показателей дашборда: начальный и конечный остаток, чистое движение
(закупки + входящие перемещения − исходящие) с полной разбивкой по записям.

compute_dashboard_metrics — чистая функция фильтра и снимка журналов;
get_dashboard_metrics загружает снимок из БД и ограничивает его базами пользователя.
"""
import logging
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.config import DEFAULT_RANGE_DAYS, OPENING_BALANCE
from asset_tracker.exceptions import PreconditionError
from asset_tracker.models import Assignment, Expenditure, Purchase, Transfer, User
from asset_tracker.repositories import record_repo, reference_repo
from asset_tracker.schemas.dashboard import (
    DashboardFilter,
    DashboardMetrics,
    DateRange,
    NetMovementBreakdown,
)
from asset_tracker.schemas.records import PurchaseOut, TransferOut
from asset_tracker.services import access_policy

logger = logging.getLogger(__name__)


def default_filters(today: date) -> DashboardFilter:
    """Период по умолчанию: последние DEFAULT_RANGE_DAYS дней, включая сегодня."""
    return DashboardFilter(
        date_range=DateRange(start=today - timedelta(days=DEFAULT_RANGE_DAYS), end=today),
    )


def _matches_equipment(record, filters: DashboardFilter) -> bool:
    return not filters.equipment_type_id or record.equipment_type_id == filters.equipment_type_id


def filter_purchases(purchases: Iterable[Purchase], filters: DashboardFilter) -> list[Purchase]:
    return [
        p for p in purchases
        if filters.date_range.contains(p.purchase_date)
        and (not filters.base_id or p.receiving_base_id == filters.base_id)
        and _matches_equipment(p, filters)
    ]


def filter_transfers(
    transfers: Iterable[Transfer],
    filters: DashboardFilter,
) -> tuple[list[Transfer], list[Transfer]]:
    """
    Возвращает (входящие, исходящие). Без фильтра по базе одно перемещение
    попадает в оба списка: в разрезе всей организации направления нет.
    Статус перемещения не фильтруется.
    """
    dated = [
        t for t in transfers
        if filters.date_range.contains(t.transfer_date) and _matches_equipment(t, filters)
    ]
    transfers_in = [t for t in dated if not filters.base_id or t.destination_base_id == filters.base_id]
    transfers_out = [t for t in dated if not filters.base_id or t.source_base_id == filters.base_id]
    return transfers_in, transfers_out


def filter_expenditures(expenditures: Iterable[Expenditure], filters: DashboardFilter) -> list[Expenditure]:
    return [
        e for e in expenditures
        if filters.date_range.contains(e.expenditure_date)
        and (not filters.base_id or e.base_id == filters.base_id)
        and _matches_equipment(e, filters)
    ]


def filter_assignments(assignments: Iterable[Assignment], filters: DashboardFilter) -> list[Assignment]:
    return [
        a for a in assignments
        if filters.date_range.contains(a.assignment_date)
        and (not filters.base_id or a.base_of_assignment_id == filters.base_id)
        and _matches_equipment(a, filters)
    ]


def compute_dashboard_metrics(
    filters: DashboardFilter,
    purchases: Sequence[Purchase],
    transfers: Sequence[Transfer],
    assignments: Sequence[Assignment],
    expenditures: Sequence[Expenditure],
    opening_balance: int = OPENING_BALANCE,
) -> DashboardMetrics:
    filtered_purchases = filter_purchases(purchases, filters)
    transfers_in, transfers_out = filter_transfers(transfers, filters)
    filtered_expenditures = filter_expenditures(expenditures, filters)
    filtered_assignments = filter_assignments(assignments, filters)

    total_purchases = sum(p.quantity for p in filtered_purchases)
    total_transfers_in = sum(t.quantity for t in transfers_in)
    total_transfers_out = sum(t.quantity for t in transfers_out)
    total_expended = sum(e.quantity_expended for e in filtered_expenditures)
    total_assigned = sum(1 for a in filtered_assignments if a.is_active)

    net_movement = total_purchases + total_transfers_in - total_transfers_out

    breakdown = NetMovementBreakdown(
        purchases=[PurchaseOut.model_validate(p) for p in filtered_purchases],
        transfers_in=[TransferOut.model_validate(t) for t in transfers_in],
        transfers_out=[TransferOut.model_validate(t) for t in transfers_out],
        total_purchases=total_purchases,
        total_transfers_in=total_transfers_in,
        total_transfers_out=total_transfers_out,
        net_movement=net_movement,
    )
    closing_balance = opening_balance + net_movement - total_expended
    return DashboardMetrics(
        opening_balance=opening_balance,
        closing_balance=closing_balance,
        net_movement=net_movement,
        assigned_assets=total_assigned,
        expended_assets=total_expended,
        net_movement_breakdown=breakdown,
    )


async def get_dashboard_metrics(
    db: AsyncSession,
    filters: DashboardFilter,
    user: User,
) -> DashboardMetrics:
    """
    Показатели дашборда для пользователя. Фильтр по чужой базе — AuthorizationError;
    без фильтра учитываются только записи, видимые пользователю.
    """
    if filters.date_range.end < filters.date_range.start:
        raise PreconditionError("End date must not be earlier than start date")
    all_base_ids = await reference_repo.get_all_base_ids(db)
    bases = access_policy.visible_bases(user, all_base_ids)
    if filters.base_id:
        access_policy.ensure_can_view(user, filters.base_id, all_base_ids)

    purchases = [p for p in await record_repo.get_purchases(db) if access_policy.purchase_visible(p, bases)]
    transfers = [t for t in await record_repo.get_transfers(db) if access_policy.transfer_visible(t, bases)]
    assignments = [a for a in await record_repo.get_assignments(db) if access_policy.assignment_visible(a, bases)]
    expenditures = [e for e in await record_repo.get_expenditures(db) if access_policy.expenditure_visible(e, bases)]

    metrics = compute_dashboard_metrics(filters, purchases, transfers, assignments, expenditures)
    logger.info(
        "dashboard_metrics user_id=%s start=%s end=%s base_id=%s equipment_type_id=%s net_movement=%s",
        user.id,
        filters.date_range.start,
        filters.date_range.end,
        filters.base_id,
        filters.equipment_type_id,
        metrics.net_movement,
    )
    return metrics
