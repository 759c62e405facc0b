"""
Заполнение хранилища примерными данными: справочники, демо-учётки и несколько движений
(закупки, перемещение, выдача, списание) за последние дни.
Запуск из корня проекта: DATABASE_URL=sqlite+aiosqlite:///data/app.db python -m scripts.seed_sample_data
"""
import asyncio
import sys
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from asset_tracker.config import DATA_DIR
from asset_tracker.database import AsyncSessionLocal, create_tables
from asset_tracker.repositories import record_repo, reference_repo
from asset_tracker.schemas.records import (
    AssignmentCreate,
    ExpenditureCreate,
    PurchaseCreate,
    TransferCreate,
)
from asset_tracker.seed import seed_reference_data
from asset_tracker.services import record_service
from asset_tracker.utils.clock import today


async def seed_movements(session) -> None:
    admin = await reference_repo.get_user_by_username(session, "admin")
    d = today()
    await record_service.add_purchase(session, PurchaseCreate(
        asset_id="asset-eq-3", quantity=100, unit_cost=Decimal("0.45"),
        purchase_date=d - timedelta(days=10), supplier_info="Lake City Army Ammunition Plant",
        receiving_base_id="base-1", purchase_order_number="PO-2024-001",
    ), admin)
    await record_service.add_purchase(session, PurchaseCreate(
        asset_id="asset-eq-1", quantity=50, unit_cost=Decimal("1200"),
        purchase_date=d - timedelta(days=7), supplier_info="Colt Defense",
        receiving_base_id="base-1",
    ), admin)
    await record_service.add_transfer(session, TransferCreate(
        asset_id="asset-eq-1", quantity=30, source_base_id="base-1", destination_base_id="base-2",
        transfer_date=d - timedelta(days=5), reason="Training rotation",
    ), admin)
    await record_service.add_assignment(session, AssignmentCreate(
        asset_id="asset-eq-2", assigned_to_personnel_id="person-1",
        assignment_date=d - timedelta(days=3), base_of_assignment_id="base-1",
        purpose="Convoy escort", expected_return_date=d + timedelta(days=14),
    ), admin)
    await record_service.add_expenditure(session, ExpenditureCreate(
        asset_id="asset-eq-3", quantity_expended=500, expenditure_date=d - timedelta(days=1),
        base_id="base-1", reason="Live-fire exercise",
    ), admin)


async def main() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    await create_tables()
    async with AsyncSessionLocal() as session:
        added = await seed_reference_data(session)
        await session.commit()
        print(f"Справочники: добавлено {added} записей.")
        if await record_repo.get_purchases(session):
            print("Движения уже есть — пропуск.")
            return
        await seed_movements(session)
        await session.commit()
        print("Добавлены примерные движения.")


if __name__ == "__main__":
    asyncio.run(main())
