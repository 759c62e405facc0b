from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.auth import require_user
from asset_tracker.database import get_db
from asset_tracker.models import User
from asset_tracker.schemas.records import PurchaseCreate, PurchaseList, PurchaseOut
from asset_tracker.services import listing_service, record_service

router = APIRouter(prefix="/api/purchases", tags=["purchases"])


@router.get("", name="purchases", response_model=PurchaseList)
async def purchases(
    search: str | None = Query(None),
    base_id: str | None = Query(None),
    equipment_type_id: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await listing_service.list_purchases(db, current_user, search, base_id, equipment_type_id)


@router.post("", name="purchase_create", response_model=PurchaseOut, status_code=201)
async def purchase_create(
    payload: PurchaseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await record_service.add_purchase(db, payload, current_user)
