"""System routes: health and connection status."""
from __future__ import annotations

import time

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from wakelink import __version__
from wakelink.api.deps import get_context
from wakelink.context import ServerContext

router = APIRouter(prefix="/system", tags=["system"])


# ---------- Response models ----------


class HealthResponse(BaseModel):
    version: str
    uptime_seconds: float


class StatusResponse(BaseModel):
    registered_devices: int
    connected_devices: int
    connected_ids: list[str]


# ---------- Routes ----------


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    start_time = getattr(request.app.state, "start_time", time.time())
    return HealthResponse(
        version=__version__,
        uptime_seconds=round(time.time() - start_time, 2),
    )


@router.get("/status", response_model=StatusResponse)
async def system_status(context: ServerContext = Depends(get_context)) -> StatusResponse:
    connected = sorted(context.registry.connected_ids())
    return StatusResponse(
        registered_devices=len(context.catalog),
        connected_devices=len(connected),
        connected_ids=connected,
    )
