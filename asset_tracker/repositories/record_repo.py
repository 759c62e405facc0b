"""
Чтение журналов движения в порядке добавления. Фильтрация и доступ — забота вызывающего
(metrics_service, listing_service).
"""
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.models import Assignment, Expenditure, Purchase, Transfer


async def next_seq(db: AsyncSession, model) -> int:
    """Следующий порядковый номер записи в журнале model."""
    r = await db.execute(select(func.coalesce(func.max(model.seq), 0)))
    return (r.scalar() or 0) + 1


async def get_purchases(db: AsyncSession) -> list[Purchase]:
    result = await db.execute(select(Purchase).order_by(Purchase.seq))
    return list(result.scalars().all())


async def get_transfers(db: AsyncSession) -> list[Transfer]:
    result = await db.execute(select(Transfer).order_by(Transfer.seq))
    return list(result.scalars().all())


async def get_assignments(db: AsyncSession) -> list[Assignment]:
    result = await db.execute(select(Assignment).order_by(Assignment.seq))
    return list(result.scalars().all())


async def get_expenditures(db: AsyncSession) -> list[Expenditure]:
    result = await db.execute(select(Expenditure).order_by(Expenditure.seq))
    return list(result.scalars().all())

