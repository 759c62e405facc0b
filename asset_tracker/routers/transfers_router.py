from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.auth import require_user
from asset_tracker.database import get_db
from asset_tracker.models import User
from asset_tracker.models.records import TransferStatus
from asset_tracker.schemas.records import TransferCreate, TransferList, TransferOut
from asset_tracker.services import listing_service, record_service

router = APIRouter(prefix="/api/transfers", tags=["transfers"])


@router.get("", name="transfers", response_model=TransferList)
async def transfers(
    search: str | None = Query(None),
    status: TransferStatus | None = Query(None),
    base_id: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await listing_service.list_transfers(db, current_user, search, status, base_id)


@router.post("", name="transfer_create", response_model=TransferOut, status_code=201)
async def transfer_create(
    payload: TransferCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await record_service.add_transfer(db, payload, current_user)
