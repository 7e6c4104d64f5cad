import asyncio
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import (
    http_exception_handler,
    request_validation_exception_handler,
)
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from alembic import command  # type: ignore
from alembic.config import Config
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from campus_attendance.cache import init_cache, shutdown_cache
from campus_attendance.config import settings
from campus_attendance.core.exceptions import BadRequest, PersistenceFailure, ScanError
from campus_attendance.database import engine
from campus_attendance.routers import (
    attendance_router,
    health_router,
    lectures_router,
    scan_router,
)
from campus_attendance.routers.scan import SCAN_PATH
from campus_attendance.utils.logging import get_logger

logger = get_logger(__name__)


def run_migrations() -> None:
    root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    alembic_cfg = Config(os.path.join(root_dir, "alembic.ini"))
    alembic_cfg.set_main_option("script_location", os.path.join(root_dir, "alembic"))
    alembic_cfg.attributes["configure_logger"] = False
    command.upgrade(alembic_cfg, "head")


# Lifecycle Manager
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Server starting up... DB: %s", settings.DATABASE_URL.split("@")[-1])
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        try:
            logger.info("Checking for database migrations...")
            # env.py drives its own event loop, so keep it off this one
            await asyncio.to_thread(run_migrations)
            logger.info("Database is up to date.")
        except Exception as e:
            logger.warning("Migration Warning: %s", e)
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection established.")
    except Exception as e:
        logger.critical("Database connection failed! %s", e)

    await init_cache()

    yield

    logger.info("Server shutting down...")
    await shutdown_cache()
    await engine.dispose()


app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

# Scanners run from arbitrary origins (phones, kiosks); no cookies involved.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

SCAN_PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


# Registered after CORSMiddleware, so it runs first: scan preflights get an
# empty 200 instead of the middleware's "OK" body.
@app.middleware("http")
async def answer_scan_preflight(request: Request, call_next):
    if request.method == "OPTIONS" and request.url.path == SCAN_PATH:
        return Response(status_code=200, headers=SCAN_PREFLIGHT_HEADERS)
    return await call_next(request)


def _scan_error_response(error: ScanError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code, content={"ok": False, "error": error.code}
    )


@app.exception_handler(ScanError)
async def scan_error_handler(request: Request, exc: ScanError):
    if exc.status_code >= 500:
        logger.error("Scan failed: %s", exc)
    else:
        logger.info("Scan rejected (%s): %s", exc.code, exc)
    return _scan_error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # A scan body that is not an object of strings counts as missing fields
    if request.url.path == SCAN_PATH:
        logger.info("Scan rejected (missing_fields): malformed body")
        return _scan_error_response(BadRequest())
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if request.url.path == SCAN_PATH and exc.status_code == 405:
        return JSONResponse(
            status_code=405,
            content={"ok": False, "error": "method_not_allowed"},
            headers=exc.headers,
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    if request.url.path == SCAN_PATH:
        return _scan_error_response(PersistenceFailure())
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# --- Register Routers ---
app.include_router(scan_router)
app.include_router(attendance_router)
app.include_router(lectures_router)
app.include_router(health_router)


def start():
    import uvicorn

    uvicorn.run(
        "campus_attendance.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "scan": SCAN_PATH,
        "docs": "/docs",
        "version": settings.VERSION,
    }
