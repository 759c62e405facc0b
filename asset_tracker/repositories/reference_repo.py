"""
Справочные данные: базы, типы техники, активы, личный состав, пользователи.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from asset_tracker.models import Asset, EquipmentType, MilitaryBase, Personnel, User


async def get_bases_ordered(db: AsyncSession) -> list[MilitaryBase]:
    """Список всех баз, отсортированный по имени."""
    result = await db.execute(select(MilitaryBase).order_by(MilitaryBase.name))
    return list(result.scalars().all())


async def get_all_base_ids(db: AsyncSession) -> frozenset[str]:
    result = await db.execute(select(MilitaryBase.id))
    return frozenset(r[0] for r in result.all())


async def get_base_by_id(db: AsyncSession, base_id: str) -> MilitaryBase | None:
    result = await db.execute(select(MilitaryBase).where(MilitaryBase.id == base_id))
    return result.scalar_one_or_none()


async def get_equipment_types_ordered(db: AsyncSession) -> list[EquipmentType]:
    result = await db.execute(select(EquipmentType).order_by(EquipmentType.name))
    return list(result.scalars().all())


async def get_assets(db: AsyncSession, kind: str | None = None) -> list[Asset]:
    """
    Активы с типом техники. kind="assignable" — только штучные (для выдачи),
    kind="expendable" — только расходники (для списания).
    """
    q = select(Asset).order_by(Asset.id)
    if kind == "assignable":
        q = q.where(Asset.is_fungible.is_(False))
    elif kind == "expendable":
        q = q.where(Asset.is_fungible.is_(True))
    result = await db.execute(q)
    return list(result.scalars().all())


async def get_asset_by_id(db: AsyncSession, asset_id: str) -> Asset | None:
    """
    Актив по id с типом техники. populate_existing: объект мог попасть в сессию
    без загруженного equipment_type (например, сразу после сида).
    """
    result = await db.execute(
        select(Asset)
        .where(Asset.id == asset_id)
        .options(selectinload(Asset.equipment_type))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_personnel_ordered(db: AsyncSession) -> list[Personnel]:
    result = await db.execute(select(Personnel).order_by(Personnel.name))
    return list(result.scalars().all())


async def get_personnel_by_id(db: AsyncSession, personnel_id: str) -> Personnel | None:
    result = await db.execute(select(Personnel).where(Personnel.id == personnel_id))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()
