import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException
from fastapi.responses import JSONResponse

from asset_tracker.config import LOG_LEVEL, SEED_DEMO_DATA
from asset_tracker.constants import HTTP_STATUS_TO_CODE
from asset_tracker.database import AsyncSessionLocal, create_tables
from asset_tracker.exceptions import AssetTrackerError
from asset_tracker.routers import (
    auth_router,
    dashboard_router,
    reference_router,
    purchases_router,
    transfers_router,
    assignments_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Создание таблиц хранилища и (опционально) справочников при старте."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    await create_tables()
    if SEED_DEMO_DATA:
        from asset_tracker.seed import seed_reference_data
        async with AsyncSessionLocal() as session:
            await seed_reference_data(session)
            await session.commit()
    yield


app = FastAPI(title="Military Asset Management", lifespan=lifespan)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """HTTPException (401 из require_user): detail строкой, code по статусу."""
    content = {
        "detail": exc.detail,
        "code": HTTP_STATUS_TO_CODE.get(exc.status_code, "error"),
    }
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(AssetTrackerError)
async def domain_exception_handler(request: Request, exc: AssetTrackerError):
    """Ошибки сервисов: хранилище не изменено, сообщение — пользователю."""
    logger.info("request_rejected path=%s code=%s detail=%s", request.url.path, exc.code, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc), "code": exc.code})


app.include_router(auth_router.router)
app.include_router(reference_router.router)
app.include_router(dashboard_router.router)
app.include_router(purchases_router.router)
app.include_router(transfers_router.router)
app.include_router(assignments_router.router)
