from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.auth import require_user
from asset_tracker.database import get_db
from asset_tracker.models import User
from asset_tracker.repositories import reference_repo
from asset_tracker.schemas.reference import AssetOut, BaseOut, EquipmentTypeOut, PersonnelOut
from asset_tracker.services import access_policy

router = APIRouter(prefix="/api/reference", tags=["reference"])


@router.get("/bases", name="bases", response_model=list[BaseOut])
async def bases(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    """Только базы, доступные пользователю (для фильтров и форм)."""
    all_bases = await reference_repo.get_bases_ordered(db)
    visible = access_policy.visible_bases(current_user, (b.id for b in all_bases))
    return [b for b in all_bases if b.id in visible]


@router.get("/equipment-types", name="equipment_types", response_model=list[EquipmentTypeOut])
async def equipment_types(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await reference_repo.get_equipment_types_ordered(db)


@router.get("/assets", name="assets", response_model=list[AssetOut])
async def assets(
    kind: Literal["assignable", "expendable"] | None = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await reference_repo.get_assets(db, kind)


@router.get("/personnel", name="personnel", response_model=list[PersonnelOut])
async def personnel(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await reference_repo.get_personnel_ordered(db)
