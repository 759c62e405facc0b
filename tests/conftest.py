"""
Общие фикстуры: тестовая БД (SQLite in-memory), сессия со справочниками, пользователи ролей,
клиент с авторизацией.
"""
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import asset_tracker.models  # noqa: F401
from asset_tracker.database import Base, get_db, session_guard
from asset_tracker.main import app
from asset_tracker.models import User
from asset_tracker.models.user import UserRole
from asset_tracker.auth import create_session_token
from asset_tracker.config import SESSION_COOKIE_NAME
from asset_tracker.seed import seed_reference_data

# In-memory SQLite для тестов (один engine и одно соединение на весь прогон)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


def make_user(user_id: str, role: UserRole, bases: list[str], username: str | None = None) -> User:
    from werkzeug.security import generate_password_hash
    return User(
        id=user_id,
        username=username or f"user{user_id}",
        email=f"user{user_id}@military.gov",
        full_name=f"Test User {user_id}",
        password_hash=generate_password_hash("testpass", method="pbkdf2:sha256:1000"),
        role=role,
        assigned_base_ids=bases,
        is_active=True,
    )


@pytest_asyncio.fixture
async def create_tables():
    """Чистые таблицы на каждый тест (function scope — совместимо с pytest-asyncio)."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest_asyncio.fixture
async def db(create_tables) -> AsyncGenerator[AsyncSession, None]:
    """Сессия БД со справочниками, откат после теста (отдельное соединение, откат в конце)."""
    async with test_engine.connect() as conn:
        await conn.begin()
        async with AsyncSession(bind=conn, expire_on_commit=False) as session:
            await seed_reference_data(session, with_users=False)
            yield session
        await conn.rollback()


@pytest_asyncio.fixture
async def admin(db: AsyncSession) -> User:
    user = make_user("u-admin", UserRole.admin, [])
    db.add(user)
    await db.flush()
    return user


@pytest_asyncio.fixture
async def commander(db: AsyncSession) -> User:
    """Base Commander с доступом только к base-1."""
    user = make_user("u-commander", UserRole.base_commander, ["base-1"])
    db.add(user)
    await db.flush()
    return user


@pytest_asyncio.fixture
async def logistics(db: AsyncSession) -> User:
    """Logistics Officer с доступом к base-1 и base-2."""
    user = make_user("u-logistics", UserRole.logistics_officer, ["base-1", "base-2"])
    db.add(user)
    await db.flush()
    return user


@pytest_asyncio.fixture
async def db_commit(create_tables) -> AsyncGenerator[AsyncSession, None]:
    """Сессия БД с коммитом (данные видны в последующих запросах приложения)."""
    async with TestSessionLocal() as session:
        try:
            await seed_reference_data(session, with_users=False)
            for user in (
                make_user("1", UserRole.admin, [], username="testadmin"),
                make_user("2", UserRole.base_commander, ["base-1"], username="testcommander"),
                make_user("3", UserRole.logistics_officer, ["base-1", "base-2"], username="testlogistics"),
            ):
                session.add(user)
            await session.commit()
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    """Как get_db, но над тестовым engine (StaticPool: запросы выполняются по одному)."""
    async with session_guard(shared=True):
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()


async def _client(user_id: str | None) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            if user_id is not None:
                # Установить cookie сессии для авторизации
                ac.cookies.set(SESSION_COOKIE_NAME, create_session_token(user_id))
            yield ac
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def client(db_commit) -> AsyncGenerator[AsyncClient, None]:
    """HTTP-клиент под admin (testadmin)."""
    async for ac in _client("1"):
        yield ac


@pytest_asyncio.fixture
async def commander_client(db_commit) -> AsyncGenerator[AsyncClient, None]:
    """HTTP-клиент под Base Commander (только base-1)."""
    async for ac in _client("2"):
        yield ac


@pytest_asyncio.fixture
async def client_anon(db_commit) -> AsyncGenerator[AsyncClient, None]:
    """Клиент без авторизации (get_db подменён)."""
    async for ac in _client(None):
        yield ac


@pytest_asyncio.fixture
async def session_factory(db_commit):
    """Фабрика независимых сессий над тестовым engine (справочники и пользователи закоммичены)."""
    return TestSessionLocal
