"""Monitor API routes - start, stop and inspect the position monitor."""

import logging

from fastapi import APIRouter, status

from signaldesk.presentation.api.dependencies import ExitEngineDep
from signaldesk.presentation.api.v1.schemas import (
    MonitorActionResponse,
    MonitorStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/monitor", tags=["Monitor"])


@router.get(
    "/status",
    response_model=MonitorStatusResponse,
    status_code=status.HTTP_200_OK,
    summary="Monitor status",
)
async def get_monitor_status(engine: ExitEngineDep) -> MonitorStatusResponse:
    """Whether the monitor is running and how many positions are open."""
    return MonitorStatusResponse.from_dto(await engine.get_monitor_status())


@router.post(
    "/start",
    response_model=MonitorActionResponse,
    status_code=status.HTTP_200_OK,
    summary="Start the position monitor",
    description="""
    Start monitoring open positions. One pass runs immediately, then one per
    configured interval. Starting a running monitor is a no-op
    (`changed: false`).
    """,
)
async def start_monitor(engine: ExitEngineDep) -> MonitorActionResponse:
    changed = engine.start_trade_monitor()
    logger.info("api.monitor.start", extra={"changed": changed})
    return MonitorActionResponse(changed=changed, is_running=engine.monitor.is_running)


@router.post(
    "/stop",
    response_model=MonitorActionResponse,
    status_code=status.HTTP_200_OK,
    summary="Stop the position monitor",
    description="An in-flight pass completes; no new pass starts.",
)
async def stop_monitor(engine: ExitEngineDep) -> MonitorActionResponse:
    changed = engine.stop_trade_monitor()
    logger.info("api.monitor.stop", extra={"changed": changed})
    return MonitorActionResponse(changed=changed, is_running=engine.monitor.is_running)
