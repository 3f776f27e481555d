"""Admin surface for the keep-alive job, mounted at /cron."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_cron_service
from ..errors import CronConfigError
from ..schemas.cron import (
    CronStatusResponse,
    StartCronRequest,
    UpdateScheduleRequest,
    UpdateUrlRequest,
)
from ..security import require_auth
from ..services.cron_service import CronService

logger = logging.getLogger("catalog_api.routers.cron_router")

router = APIRouter(tags=["Cron"])


def _respond(cron: CronService, message=None) -> CronStatusResponse:
    return CronStatusResponse(success=True, message=message, stats=cron.get_stats())


@router.get("/status", response_model=CronStatusResponse)
def cron_status(cron: CronService = Depends(get_cron_service)):
    """Current job configuration, run statistics and success rate."""
    return _respond(cron)


# The control endpoints are async so trigger registration happens on the event loop.

@router.post("/start", response_model=CronStatusResponse, dependencies=[Depends(require_auth)])
async def cron_start(
    req: Optional[StartCronRequest] = None,
    cron: CronService = Depends(get_cron_service),
):
    """(Re)start the job. Omitted fields fall back to CRON_* settings, then defaults."""
    req = req or StartCronRequest()
    try:
        cron.start(
            enabled=True,
            schedule=req.schedule,
            url=req.url,
            method=req.method,
            timeout_ms=req.timeout,
            overlap_policy=req.overlap_policy,
        )
    except CronConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _respond(cron, "Cron service started")


@router.post("/stop", response_model=CronStatusResponse, dependencies=[Depends(require_auth)])
async def cron_stop(cron: CronService = Depends(get_cron_service)):
    """Stop the job. Safe to call when already stopped."""
    cron.stop()
    return _respond(cron, "Cron service stopped")


@router.post("/update-schedule", response_model=CronStatusResponse, dependencies=[Depends(require_auth)])
async def cron_update_schedule(
    req: UpdateScheduleRequest,
    cron: CronService = Depends(get_cron_service),
):
    """Restart with a new schedule. Activates the job if it was stopped."""
    if not req.schedule:
        raise HTTPException(status_code=400, detail="Schedule is required")
    try:
        cron.update_schedule(req.schedule)
    except CronConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _respond(cron, "Schedule updated")


@router.post("/update-url", response_model=CronStatusResponse, dependencies=[Depends(require_auth)])
async def cron_update_url(
    req: UpdateUrlRequest,
    cron: CronService = Depends(get_cron_service),
):
    """Restart against a new target URL. Activates the job if it was stopped."""
    if not req.url:
        raise HTTPException(status_code=400, detail="URL is required")
    try:
        cron.update_url(req.url)
    except CronConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _respond(cron, "URL updated")


@router.post("/run-now", response_model=CronStatusResponse, dependencies=[Depends(require_auth)])
async def cron_run_now(cron: CronService = Depends(get_cron_service)):
    """Execute one keep-alive request immediately; counts as a run."""
    try:
        ok = await cron.run_once()
    except CronConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _respond(cron, "Run succeeded" if ok else "Run failed")
