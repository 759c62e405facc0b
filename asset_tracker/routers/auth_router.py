import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.auth import (
    IdentityProvider,
    get_identity_provider,
    login_user,
    logout_user,
    require_user,
)
from asset_tracker.database import get_db
from asset_tracker.models import User
from asset_tracker.schemas.reference import LoginRequest, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["auth"])


@router.post("/login", name="login", response_model=UserOut)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    user = await provider.resolve_identity(db, payload.username, payload.password)
    login_user(response, user.id)
    logger.info("user_logged_in user_id=%s role=%s", user.id, user.role.value)
    return user


@router.post("/logout", name="logout", status_code=204)
async def logout(response: Response):
    logout_user(response)


@router.get("/me", name="me", response_model=UserOut)
async def me(current_user: User = Depends(require_user)):
    return current_user
