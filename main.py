import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError

from core.config import settings
from core.database import engine
from core.exceptions import SquadFinderError, StorageUnavailable
from core.retry import is_transient
from models.base import Base

from routers.feed import router as feed_router
from routers.interactions import router as interactions_router
from routers.match import router as match_router
from routers.chat import router as chat_router
from routers.games import router as games_router
from routers.health import router as health_router

app = FastAPI(
    title="SquadFinder Backend",
    version="0.1.0",
    description="Лента игроков, свайпы, матчи и чат для SquadFinder"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger("uvicorn.error")


@app.middleware("http")
async def log_request_time(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"{request.method} {request.url.path} completed in {process_time:.2f} ms"
    )
    return response


@app.exception_handler(SquadFinderError)
async def squadfinder_error_handler(request: Request, exc: SquadFinderError):
    if isinstance(exc, StorageUnavailable):
        logger.error(f"{request.method} {request.url.path}: {exc.detail}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(DBAPIError)
async def storage_error_handler(request: Request, exc: DBAPIError):
    # ошибки чтений вне run_with_retry: клиент просто повторит запрос
    if not is_transient(exc):
        raise exc
    logger.error(f"{request.method} {request.url.path}: storage error {exc}")
    return JSONResponse(
        status_code=StorageUnavailable.status_code,
        content={"detail": "Storage is temporarily unavailable"},
    )


app.include_router(feed_router)
app.include_router(interactions_router)
app.include_router(match_router)
app.include_router(chat_router)
app.include_router(games_router)
app.include_router(health_router)


@app.on_event("startup")
async def on_startup():
    # Создаём все таблицы
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@app.get("/")
async def root():
    return {"message": "SquadFinder Backend"}


@app.on_event("shutdown")
async def shutdown():
    # Закрываем все соединения пула
    await engine.dispose()
