from typing import Annotated, Protocol

from fastapi import Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from itsdangerous import BadSignature, URLSafeTimedSerializer
from werkzeug.security import check_password_hash

from asset_tracker.config import SECRET_KEY, SESSION_COOKIE_NAME, SECURE_COOKIES, SESSION_MAX_AGE
from asset_tracker.database import get_db
from asset_tracker.exceptions import AuthenticationError
from asset_tracker.models import User
from asset_tracker.repositories import reference_repo

serializer = URLSafeTimedSerializer(SECRET_KEY)


class IdentityProvider(Protocol):
    """Внешний поставщик учётных записей: логин/пароль -> пользователь с ролью и базами."""

    async def resolve_identity(self, db: AsyncSession, username: str, password: str) -> User:
        ...


class DatabaseIdentityProvider:
    """Проверка пароля по хешу из таблицы users."""

    async def resolve_identity(self, db: AsyncSession, username: str, password: str) -> User:
        user = await reference_repo.get_user_by_username(db, username)
        if not user or not check_password_hash(user.password_hash, password):
            raise AuthenticationError("Invalid username or password")
        if not user.is_active:
            raise AuthenticationError("Account is disabled")
        return user


identity_provider: IdentityProvider = DatabaseIdentityProvider()


def get_identity_provider() -> IdentityProvider:
    return identity_provider


def create_session_token(user_id: str) -> str:
    return serializer.dumps({"user_id": user_id})


def load_session_token(token: str) -> dict | None:
    try:
        return serializer.loads(token, max_age=SESSION_MAX_AGE)
    except BadSignature:
        return None


async def get_current_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User | None:
    """Загружает пользователя из сессии. Возвращает None, если не авторизован."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None
    data = load_session_token(token)
    if not data:
        return None
    user = await reference_repo.get_user_by_id(db, data["user_id"])
    if user is None or not user.is_active:
        return None
    return user


async def require_user(
    current_user: Annotated[User | None, Depends(get_current_user)],
) -> User:
    """Зависимость: возвращает User или выбрасывает HTTPException(401)."""
    if current_user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return current_user


def _cookie_kwargs() -> dict:
    """Общие параметры cookie (path, secure, samesite) для установки и удаления."""
    return {
        "path": "/",
        "secure": SECURE_COOKIES,
        "samesite": "lax",
    }


def login_user(response: Response, user_id: str) -> None:
    token = create_session_token(user_id)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        **_cookie_kwargs(),
    )


def logout_user(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, **_cookie_kwargs())
