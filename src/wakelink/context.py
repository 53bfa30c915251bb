"""Shared server state, built once and handed to every component."""

from __future__ import annotations

import pathlib
from dataclasses import dataclass

from wakelink.config import Settings
from wakelink.connections.registry import ConnectionRegistry
from wakelink.devices.catalog import DeviceCatalog
from wakelink.devices.json_file import JsonFileDeviceStore
from wakelink.devices.store import DeviceStore
from wakelink.wake.dispatcher import WakeDispatcher


@dataclass
class ServerContext:
    """Everything a request or connection handler may touch."""

    settings: Settings
    catalog: DeviceCatalog
    registry: ConnectionRegistry
    dispatcher: WakeDispatcher


async def build_context(settings: Settings, store: DeviceStore | None = None) -> ServerContext:
    """Wire catalog, registry and dispatcher, loading the catalog from *store*.

    Without an explicit store, the JSON file named in ``storage.devices_file``
    is used.
    """
    if store is None:
        store = JsonFileDeviceStore(pathlib.Path(settings.storage.devices_file))
    catalog = DeviceCatalog(store)
    await catalog.load()
    registry = ConnectionRegistry()
    return ServerContext(
        settings=settings,
        catalog=catalog,
        registry=registry,
        dispatcher=WakeDispatcher(catalog, registry),
    )
