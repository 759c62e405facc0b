import asyncio
import contextlib
import weakref

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from asset_tracker.config import DATABASE_URL


def _is_shared_connection(url: str) -> bool:
    return url.startswith("sqlite") and ":memory:" in url


def _engine_kwargs(url: str) -> dict:
    """In-memory SQLite: одно соединение на процесс, иначе каждое соединение видит пустую БД."""
    if _is_shared_connection(url):
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


# Все сессии работают через одно соединение и, значит, через одну транзакцию
SHARED_CONNECTION = _is_shared_connection(DATABASE_URL)

engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    **_engine_kwargs(DATABASE_URL),
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# Блокировки заводятся отдельно на каждый event loop
_loop_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, dict[str, asyncio.Lock]]" = (
    weakref.WeakKeyDictionary()
)


def _loop_lock(name: str) -> asyncio.Lock:
    locks = _loop_locks.setdefault(asyncio.get_running_loop(), {})
    lock = locks.get(name)
    if lock is None:
        lock = locks[name] = asyncio.Lock()
    return lock


def write_lock() -> asyncio.Lock:
    """Единственный писатель: проверка, добавление записи и commit под одной блокировкой."""
    return _loop_lock("write")


def session_lock() -> asyncio.Lock:
    """Сессии над общим соединением выполняются по одной."""
    return _loop_lock("session")


def session_guard(shared: bool = SHARED_CONNECTION):
    return session_lock() if shared else contextlib.nullcontext()


async def create_tables() -> None:
    """Создаёт таблицы хранилища (идемпотентно)."""
    import asset_tracker.models  # noqa: F401  регистрация моделей в metadata
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    """
    Сессия БД на один запрос. В конце запроса выполняется commit(), при ошибке — rollback().
    Для in-memory хранилища запросы с сессией выполняются по одному.
    """
    async with session_guard():
        async with AsyncSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()
