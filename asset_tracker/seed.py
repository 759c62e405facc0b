"""
Справочные данные и демо-учётки: базы, типы техники, активы, личный состав, пользователи.
Заполнение идемпотентно: существующие по id записи не трогаются.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import generate_password_hash

from asset_tracker.models import Asset, EquipmentType, MilitaryBase, Personnel, User
from asset_tracker.models.reference import AssetStatus, EquipmentCategory
from asset_tracker.models.user import UserRole

logger = logging.getLogger(__name__)

BASES = [
    {"id": "base-1", "name": "Fort Liberty", "location": "North Carolina, USA", "description": "Primary training facility"},
    {"id": "base-2", "name": "Camp Pendleton", "location": "California, USA", "description": "Marine Corps base"},
    {"id": "base-3", "name": "Joint Base Lewis-McChord", "location": "Washington, USA", "description": "Joint operations base"},
]

EQUIPMENT_TYPES = [
    {"id": "eq-1", "name": "M4A1 Carbine", "category": EquipmentCategory.ground, "description": "Standard issue rifle"},
    {"id": "eq-2", "name": "HMMWV", "category": EquipmentCategory.ground, "description": "High Mobility Multipurpose Wheeled Vehicle"},
    {"id": "eq-3", "name": "5.56mm Ammunition", "category": EquipmentCategory.consumable, "description": "Standard rifle ammunition"},
    {"id": "eq-4", "name": "M1A2 Abrams", "category": EquipmentCategory.heavy_weaponry, "description": "Main battle tank"},
]

PERSONNEL = [
    {"id": "person-1", "name": "Sergeant Williams", "rank": "SGT", "unit": "Alpha Company"},
    {"id": "person-2", "name": "Corporal Johnson", "rank": "CPL", "unit": "Bravo Company"},
    {"id": "person-3", "name": "Private Davis", "rank": "PVT", "unit": "Charlie Company"},
    {"id": "person-4", "name": "Lieutenant Brown", "rank": "LT", "unit": "Delta Company"},
]

# Демо-учётки, у всех пароль DEMO_PASSWORD
DEMO_PASSWORD = "password"
USERS = [
    {"id": "1", "username": "admin", "email": "admin@military.gov", "full_name": "System Administrator",
     "role": UserRole.admin, "assigned_base_ids": ["base-1", "base-2", "base-3"]},
    {"id": "2", "username": "commander", "email": "commander@military.gov", "full_name": "Base Commander Johnson",
     "role": UserRole.base_commander, "assigned_base_ids": ["base-1"]},
    {"id": "3", "username": "logistics", "email": "logistics@military.gov", "full_name": "Logistics Officer Smith",
     "role": UserRole.logistics_officer, "assigned_base_ids": ["base-1", "base-2"]},
]


def make_asset(equipment_type: dict, base_id: str) -> dict:
    """Актив на каждый тип техники: расходник — 10000 шт. с остатком 8500, иначе 5 единиц."""
    fungible = equipment_type["category"] == EquipmentCategory.consumable
    return {
        "id": f"asset-{equipment_type['id']}",
        "equipment_type_id": equipment_type["id"],
        "model_name": equipment_type["name"],
        "serial_number": None if fungible else f"SN-{equipment_type['id'].upper()}-0001",
        "current_base_id": base_id,
        "quantity": 10000 if fungible else 5,
        "status": AssetStatus.operational,
        "is_fungible": fungible,
        "current_balance": 8500 if fungible else 5,
    }


async def seed_reference_data(db: AsyncSession, with_users: bool = True) -> int:
    """Добавляет отсутствующие справочные записи. Возвращает число добавленных."""
    added = 0

    async def _add(model, data: dict) -> None:
        nonlocal added
        if await db.get(model, data["id"]) is None:
            db.add(model(**data))
            added += 1

    for b in BASES:
        await _add(MilitaryBase, b)
    for et in EQUIPMENT_TYPES:
        await _add(EquipmentType, et)
    await db.flush()
    for et in EQUIPMENT_TYPES:
        await _add(Asset, make_asset(et, BASES[0]["id"]))
    for p in PERSONNEL:
        await _add(Personnel, p)
    if with_users:
        for u in USERS:
            await _add(User, {**u, "password_hash": generate_password_hash(DEMO_PASSWORD)})
    await db.flush()
    logger.info("reference_data_seeded added=%s", added)
    return added
