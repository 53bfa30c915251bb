"""FastAPI application factory for the wakelink server."""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wakelink import __version__
from wakelink.api.routes_devices import router as devices_router
from wakelink.api.routes_system import router as system_router
from wakelink.api.routes_wake import router as wake_router
from wakelink.api.ws import router as ws_router
from wakelink.context import ServerContext
from wakelink.errors import WakelinkError

logger = logging.getLogger(__name__)


async def _wakelink_error_handler(request: Request, exc: WakelinkError) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(context: ServerContext) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Shared server state; stored on ``app.state.context``.

    Returns:
        Configured FastAPI application instance.
    """
    start_time = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app.state.start_time = start_time
        yield
        # Wake every writer so open connections close before the loop stops
        for device_id in context.registry.connected_ids():
            handle = context.registry.lookup(device_id)
            if handle is not None:
                handle.close()

    app = FastAPI(
        title="Wakelink Server",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.start_time = start_time
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.settings.api.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(WakelinkError, _wakelink_error_handler)

    app.include_router(system_router)
    app.include_router(devices_router)
    app.include_router(wake_router)
    app.include_router(ws_router)

    return app
