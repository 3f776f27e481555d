"""Catalog API: FastAPI application entry-point."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from catalog_api import models  # noqa: F401  (registers tables on Base.metadata)
from catalog_api.clients.http_client import HttpxClient
from catalog_api.config import settings
from catalog_api.database import Base, engine
from catalog_api.dependencies import build_image_store, get_cron_service
from catalog_api.errors import CronConfigError
from catalog_api.routers.auth_router import router as auth_router
from catalog_api.routers.category_router import router as category_router
from catalog_api.routers.cron_router import router as cron_router
from catalog_api.routers.product_router import router as product_router
from catalog_api.schemas.cron import KeepAliveCronSummary, KeepAliveResponse
from catalog_api.services.cron_service import CronService
from catalog_api.services.cron_trigger import AsyncioCronTrigger

# ── Logging ─────────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
)
logger = logging.getLogger("catalog_api")

_BOOT_TIME = time.monotonic()


# ── Lifespan ────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Catalog API starting: port=%s  environment=%s  database=%s",
        settings.SERVER_PORT,
        settings.ENVIRONMENT,
        engine.url.render_as_string(hide_password=True),
    )
    Base.metadata.create_all(bind=engine)

    if settings.IMAGE_STORE == "local":
        Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.state.image_store = build_image_store(settings)
    logger.info("Image store: %s", settings.IMAGE_STORE)

    http = HttpxClient()
    cron = CronService(settings, AsyncioCronTrigger(), http)
    app.state.cron_service = cron
    try:
        cron.start()
    except CronConfigError as exc:
        # A bad CRON_* value must not keep the API from serving
        logger.error("Cron service not started: %s", exc)

    yield

    await cron.aclose()
    await http.aclose()
    logger.info("Catalog API shutting down")


# ── App ─────────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="Catalog API",
    description=(
        "Product catalog organised by category and subcategory, with a "
        "self-scheduling keep-alive job managed under /cron."
    ),
    version="1.0.0",
    lifespan=lifespan,
    root_path=settings.ROOT_PATH,
)

app.include_router(auth_router, prefix="/api")
app.include_router(category_router, prefix="/api")
app.include_router(product_router, prefix="/api")
app.include_router(cron_router, prefix="/cron")

if settings.IMAGE_STORE == "local":
    app.mount(
        settings.UPLOAD_URL_PREFIX,
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )


# ── Global exception handler ───────────────────────────────────────────────────

@app.exception_handler(Exception)
async def _unhandled_exception(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Something went wrong!" if settings.ENVIRONMENT == "production" else str(exc),
            "error": type(exc).__name__,
            "path": str(request.url.path),
            "method": request.method,
        },
    )


# ── Health ──────────────────────────────────────────────────────────────────────

@app.get("/api/health", tags=["Health"])
def health():
    """Liveness plus a database round-trip."""
    database = "connected"
    try:
        with engine.connect() as conn:
            conn.exec_driver_sql("SELECT 1")
    except Exception as exc:
        logger.warning("Database health check failed: %s", exc)
        database = "unavailable"

    return {
        "status": "OK" if database == "connected" else "degraded",
        "message": "API is running successfully",
        "timestamp": datetime.now(timezone.utc),
        "uptime_seconds": round(time.monotonic() - _BOOT_TIME, 3),
        "database": database,
    }


@app.get("/api/test", tags=["Health"])
def test_route():
    return {
        "message": "Test route working!",
        "environment": settings.ENVIRONMENT,
        "version": settings.API_VERSION,
    }


@app.get("/keep-alive/status", response_model=KeepAliveResponse, tags=["Health"])
def keep_alive_status(cron: CronService = Depends(get_cron_service)):
    """Default target of the keep-alive job."""
    stats = cron.get_stats()
    return KeepAliveResponse(
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=round(time.monotonic() - _BOOT_TIME, 3),
        cron=KeepAliveCronSummary(
            enabled=stats["enabled"],
            total_runs=stats["total_runs"],
            last_run_status=stats["last_run_status"],
        ),
    )


# ── Entry-point ─────────────────────────────────────────────────────────────────

def main():
    uvicorn.run(
        "main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )


if __name__ == "__main__":
    main()
