"""
Unit-тесты журналов: поиск и фильтры страниц, сводки, видимость по базам и порядок «сначала новые».
"""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.models import Assignment, Expenditure, Transfer
from asset_tracker.models.records import TransferStatus
from asset_tracker.schemas.records import (
    AssignmentCreate,
    ExpenditureCreate,
    PurchaseCreate,
    TransferCreate,
)
from asset_tracker.services import listing_service, record_service

USER = {"id": "u", "username": "u", "full_name": "Officer Smith", "role": "admin"}


def _transfer(tid: str, status: TransferStatus, source="base-1", destination="base-2") -> Transfer:
    return Transfer(
        id=tid, seq=1, asset_id="asset-eq-1", equipment_type_id="eq-1",
        asset={"equipment_type": {"name": "M4A1 Carbine"}}, quantity=1,
        source_base_id=source, source_base={}, destination_base_id=destination, destination_base={},
        transfer_date=date(2024, 1, 1), reason="Rotation", status=status,
        initiated_by_user_id="u", initiated_by_user=USER,
    )


def _assignment(aid: str, is_active: bool, expected_return_date: date | None) -> Assignment:
    return Assignment(
        id=aid, seq=1, asset_id="asset-eq-2", equipment_type_id="eq-2",
        asset={"equipment_type": {"name": "HMMWV"}},
        assigned_to_personnel_id="person-1", assigned_to={"name": "Sergeant Williams"},
        assignment_date=date(2024, 1, 1), base_of_assignment_id="base-1", base_of_assignment={},
        purpose="Convoy escort", expected_return_date=expected_return_date, is_active=is_active,
        recorded_by_user_id="u", recorded_by_user=USER,
    )


def _expenditure(eid: str, qty: int, day: date) -> Expenditure:
    return Expenditure(
        id=eid, seq=1, asset_id="asset-eq-3", equipment_type_id="eq-3",
        asset={"equipment_type": {"name": "5.56mm Ammunition"}}, quantity_expended=qty,
        expenditure_date=day, base_id="base-1", base={}, reason="Live fire",
        reported_by_user_id="u", reported_by_user=USER,
    )


def test_transfer_summary_counts_every_status():
    transfers = [
        _transfer("t1", TransferStatus.initiated),
        _transfer("t2", TransferStatus.in_transit),
        _transfer("t3", TransferStatus.received),
        _transfer("t4", TransferStatus.received),
        _transfer("t5", TransferStatus.cancelled),
    ]
    summary = listing_service.summarize_transfers(transfers)
    assert summary.count == 5
    assert summary.open == 2
    assert summary.by_status == {"initiated": 1, "in_transit": 1, "received": 2, "cancelled": 1}


def test_filter_transfers_by_status_base_and_search():
    transfers = [
        _transfer("t1", TransferStatus.initiated),
        _transfer("t2", TransferStatus.received, source="base-3", destination="base-1"),
        _transfer("t3", TransferStatus.received, source="base-2", destination="base-3"),
    ]
    assert [t.id for t in listing_service.filter_transfers(transfers, status=TransferStatus.received)] == ["t2", "t3"]
    assert [t.id for t in listing_service.filter_transfers(transfers, base_id="base-1")] == ["t1", "t2"]
    assert len(listing_service.filter_transfers(transfers, search="carbine")) == 3
    assert listing_service.filter_transfers(transfers, search="tank") == []


def test_assignment_summary_and_active_filter():
    on = date(2024, 6, 1)
    assignments = [
        _assignment("a1", True, date(2024, 5, 1)),
        _assignment("a2", True, date(2024, 7, 1)),
        _assignment("a3", False, date(2024, 5, 1)),
        _assignment("a4", True, None),
    ]
    summary = listing_service.summarize_assignments(assignments, on)
    assert (summary.active, summary.returned, summary.overdue) == (3, 1, 1)
    assert [a.id for a in listing_service.filter_assignments(assignments, active="returned")] == ["a3"]
    assert len(listing_service.filter_assignments(assignments, active="active")) == 3
    assert len(listing_service.filter_assignments(assignments, search="williams")) == 4


def test_expenditure_summary_this_month():
    on = date(2024, 3, 15)
    expenditures = [
        _expenditure("e1", 100, date(2024, 3, 1)),
        _expenditure("e2", 50, date(2024, 2, 28)),
        _expenditure("e3", 25, date(2023, 3, 10)),
    ]
    summary = listing_service.summarize_expenditures(expenditures, on)
    assert summary.count == 3
    assert summary.total_quantity == 175
    assert summary.this_month == 1
    assert len(listing_service.filter_expenditures(expenditures, search="officer smith")) == 3


@pytest.mark.asyncio
async def test_list_purchases_newest_first_with_summary(db: AsyncSession, admin):
    for qty, supplier in ((10, "Colt Defense"), (20, "General Dynamics")):
        await record_service.add_purchase(db, PurchaseCreate(
            asset_id="asset-eq-1", quantity=qty, unit_cost=Decimal("2"),
            supplier_info=supplier, receiving_base_id="base-1",
        ), admin)
    listing = await listing_service.list_purchases(db, admin)
    assert [p.supplier_info for p in listing.items] == ["General Dynamics", "Colt Defense"]
    assert listing.summary.count == 2
    assert listing.summary.total_quantity == 30
    assert listing.summary.total_value == Decimal("60")

    searched = await listing_service.list_purchases(db, admin, search="colt")
    assert [p.quantity for p in searched.items] == [10]


@pytest.mark.asyncio
async def test_listings_hidden_from_other_bases(db: AsyncSession, admin, commander):
    """Commander base-1 не видит записи, касающиеся только base-2 и base-3."""
    await record_service.add_purchase(db, PurchaseCreate(
        asset_id="asset-eq-1", quantity=5, unit_cost=Decimal("1"),
        supplier_info="Supplier", receiving_base_id="base-2",
    ), admin)
    await record_service.add_transfer(db, TransferCreate(
        asset_id="asset-eq-1", quantity=2, source_base_id="base-2",
        destination_base_id="base-3", reason="Rotation",
    ), admin)
    await record_service.add_transfer(db, TransferCreate(
        asset_id="asset-eq-1", quantity=1, source_base_id="base-2",
        destination_base_id="base-1", reason="Resupply",
    ), admin)
    await record_service.add_assignment(db, AssignmentCreate(
        asset_id="asset-eq-2", assigned_to_personnel_id="person-2",
        base_of_assignment_id="base-2", purpose="Patrol",
    ), admin)
    await record_service.add_expenditure(db, ExpenditureCreate(
        asset_id="asset-eq-3", quantity_expended=10, base_id="base-3", reason="Training",
    ), admin)

    assert (await listing_service.list_purchases(db, commander)).items == []
    transfers = await listing_service.list_transfers(db, commander)
    assert [t.reason for t in transfers.items] == ["Resupply"]
    assert (await listing_service.list_assignments(db, commander)).items == []
    assert (await listing_service.list_expenditures(db, commander)).items == []

    assert len((await listing_service.list_transfers(db, admin)).items) == 2
