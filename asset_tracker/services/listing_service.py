"""
Журналы для страниц закупок, перемещений, выдач и списаний: поиск, фильтры и сводки.
Сначала записи ограничиваются базами пользователя, затем применяются фильтры страницы.
"""
from collections import Counter
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.models import Assignment, Expenditure, Purchase, Transfer, User
from asset_tracker.models.records import TransferStatus
from asset_tracker.repositories import record_repo, reference_repo
from asset_tracker.schemas.records import (
    AssignmentList,
    AssignmentOut,
    AssignmentSummary,
    ExpenditureList,
    ExpenditureOut,
    ExpenditureSummary,
    PurchaseList,
    PurchaseOut,
    PurchaseSummary,
    TransferList,
    TransferOut,
    TransferSummary,
)
from asset_tracker.services import access_policy
from asset_tracker.utils.clock import today


def _equipment_name(record) -> str:
    return ((record.asset or {}).get("equipment_type") or {}).get("name") or ""


def _matches_search(term: str | None, *fields: str | None) -> bool:
    if not term:
        return True
    needle = term.strip().lower()
    return any(needle in (f or "").lower() for f in fields)


async def _visible_bases(db: AsyncSession, user: User) -> frozenset[str]:
    return access_policy.visible_bases(user, await reference_repo.get_all_base_ids(db))


def filter_purchases(
    purchases: list[Purchase],
    search: str | None = None,
    base_id: str | None = None,
    equipment_type_id: str | None = None,
) -> list[Purchase]:
    return [
        p for p in purchases
        if _matches_search(search, _equipment_name(p), p.supplier_info, p.purchase_order_number)
        and (not base_id or p.receiving_base_id == base_id)
        and (not equipment_type_id or p.equipment_type_id == equipment_type_id)
    ]


def summarize_purchases(purchases: list[Purchase]) -> PurchaseSummary:
    return PurchaseSummary(
        count=len(purchases),
        total_quantity=sum(p.quantity for p in purchases),
        total_value=sum(p.total_cost for p in purchases),
    )


def filter_transfers(
    transfers: list[Transfer],
    search: str | None = None,
    status: TransferStatus | None = None,
    base_id: str | None = None,
) -> list[Transfer]:
    """Фильтр по базе: база — отправитель или получатель."""
    return [
        t for t in transfers
        if _matches_search(search, _equipment_name(t), t.reason)
        and (status is None or t.status == status)
        and (not base_id or base_id in (t.source_base_id, t.destination_base_id))
    ]


def summarize_transfers(transfers: list[Transfer]) -> TransferSummary:
    counts = Counter(t.status.value for t in transfers)
    return TransferSummary(
        count=len(transfers),
        open=sum(1 for t in transfers if not t.status.is_terminal),
        by_status={s.value: counts.get(s.value, 0) for s in TransferStatus},
    )


def filter_assignments(
    assignments: list[Assignment],
    search: str | None = None,
    base_id: str | None = None,
    active: str | None = None,
) -> list[Assignment]:
    """active: "active" — не возвращённые, "returned" — возвращённые, пусто — все."""
    return [
        a for a in assignments
        if _matches_search(search, _equipment_name(a), (a.assigned_to or {}).get("name"), a.purpose)
        and (not base_id or a.base_of_assignment_id == base_id)
        and (not active or (active == "active" and a.is_active) or (active == "returned" and not a.is_active))
    ]


def summarize_assignments(assignments: list[Assignment], on: date) -> AssignmentSummary:
    return AssignmentSummary(
        active=sum(1 for a in assignments if a.is_active),
        returned=sum(1 for a in assignments if not a.is_active),
        overdue=sum(
            1 for a in assignments
            if a.is_active and a.expected_return_date and a.expected_return_date < on
        ),
    )


def filter_expenditures(
    expenditures: list[Expenditure],
    search: str | None = None,
    base_id: str | None = None,
) -> list[Expenditure]:
    return [
        e for e in expenditures
        if _matches_search(search, _equipment_name(e), e.reason, (e.reported_by_user or {}).get("full_name"))
        and (not base_id or e.base_id == base_id)
    ]


def summarize_expenditures(expenditures: list[Expenditure], on: date) -> ExpenditureSummary:
    return ExpenditureSummary(
        count=len(expenditures),
        total_quantity=sum(e.quantity_expended for e in expenditures),
        this_month=sum(
            1 for e in expenditures
            if (e.expenditure_date.year, e.expenditure_date.month) == (on.year, on.month)
        ),
    )


async def list_purchases(
    db: AsyncSession,
    user: User,
    search: str | None = None,
    base_id: str | None = None,
    equipment_type_id: str | None = None,
) -> PurchaseList:
    bases = await _visible_bases(db, user)
    visible = [p for p in await record_repo.get_purchases(db) if access_policy.purchase_visible(p, bases)]
    items = filter_purchases(visible, search, base_id, equipment_type_id)
    return PurchaseList(
        items=[PurchaseOut.model_validate(p) for p in reversed(items)],
        summary=summarize_purchases(items),
    )


async def list_transfers(
    db: AsyncSession,
    user: User,
    search: str | None = None,
    status: TransferStatus | None = None,
    base_id: str | None = None,
) -> TransferList:
    bases = await _visible_bases(db, user)
    visible = [t for t in await record_repo.get_transfers(db) if access_policy.transfer_visible(t, bases)]
    items = filter_transfers(visible, search, status, base_id)
    return TransferList(
        items=[TransferOut.model_validate(t) for t in reversed(items)],
        summary=summarize_transfers(items),
    )


async def list_assignments(
    db: AsyncSession,
    user: User,
    search: str | None = None,
    base_id: str | None = None,
    active: str | None = None,
) -> AssignmentList:
    bases = await _visible_bases(db, user)
    visible = [a for a in await record_repo.get_assignments(db) if access_policy.assignment_visible(a, bases)]
    items = filter_assignments(visible, search, base_id, active)
    return AssignmentList(
        items=[AssignmentOut.model_validate(a) for a in reversed(items)],
        summary=summarize_assignments(items, today()),
    )


async def list_expenditures(
    db: AsyncSession,
    user: User,
    search: str | None = None,
    base_id: str | None = None,
) -> ExpenditureList:
    bases = await _visible_bases(db, user)
    visible = [e for e in await record_repo.get_expenditures(db) if access_policy.expenditure_visible(e, bases)]
    items = filter_expenditures(visible, search, base_id)
    return ExpenditureList(
        items=[ExpenditureOut.model_validate(e) for e in reversed(items)],
        summary=summarize_expenditures(items, today()),
    )
