"""FastAPI dependency injection providers.

The :class:`ServerContext` is attached to ``app.state`` by ``create_app``;
these providers hand its parts to route handlers.
"""
from __future__ import annotations

from fastapi import Depends, Request

from wakelink.context import ServerContext
from wakelink.devices.catalog import DeviceCatalog
from wakelink.wake.dispatcher import WakeDispatcher


def get_context(request: Request) -> ServerContext:
    return request.app.state.context


def get_catalog(context: ServerContext = Depends(get_context)) -> DeviceCatalog:
    return context.catalog


def get_dispatcher(context: ServerContext = Depends(get_context)) -> WakeDispatcher:
    return context.dispatcher
