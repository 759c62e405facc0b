from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.auth import require_user
from asset_tracker.database import get_db
from asset_tracker.models import User
from asset_tracker.schemas.records import (
    AssignmentCreate,
    AssignmentList,
    AssignmentOut,
    ExpenditureCreate,
    ExpenditureList,
    ExpenditureOut,
)
from asset_tracker.services import listing_service, record_service

router = APIRouter(prefix="/api", tags=["assignments"])


@router.get("/assignments", name="assignments", response_model=AssignmentList)
async def assignments(
    search: str | None = Query(None),
    base_id: str | None = Query(None),
    active: Literal["active", "returned"] | None = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await listing_service.list_assignments(db, current_user, search, base_id, active)


@router.post("/assignments", name="assignment_create", response_model=AssignmentOut, status_code=201)
async def assignment_create(
    payload: AssignmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await record_service.add_assignment(db, payload, current_user)


@router.get("/expenditures", name="expenditures", response_model=ExpenditureList)
async def expenditures(
    search: str | None = Query(None),
    base_id: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await listing_service.list_expenditures(db, current_user, search, base_id)


@router.post("/expenditures", name="expenditure_create", response_model=ExpenditureOut, status_code=201)
async def expenditure_create(
    payload: ExpenditureCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user),
):
    return await record_service.add_expenditure(db, payload, current_user)
