# tests/integration/conftest.py
import pathlib
import time

import pytest
from fastapi.testclient import TestClient

from wakelink.config import Settings, StorageConfig
from wakelink.connections.registry import ConnectionRegistry
from wakelink.context import ServerContext
from wakelink.devices.catalog import DeviceCatalog
from wakelink.devices.json_file import JsonFileDeviceStore
from wakelink.wake.dispatcher import WakeDispatcher

MAC = "AA:BB:CC:DD:EE:FF"


def make_context(settings: Settings, store) -> ServerContext:
    catalog = DeviceCatalog(store)
    registry = ConnectionRegistry()
    return ServerContext(
        settings=settings,
        catalog=catalog,
        registry=registry,
        dispatcher=WakeDispatcher(catalog, registry),
    )


@pytest.fixture
def devices_file(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "devices.json"


@pytest.fixture
def settings(devices_file: pathlib.Path) -> Settings:
    return Settings(storage=StorageConfig(devices_file=str(devices_file)))


@pytest.fixture
def context(settings: Settings, devices_file: pathlib.Path) -> ServerContext:
    return make_context(settings, JsonFileDeviceStore(devices_file))


@pytest.fixture
def app(context: ServerContext):
    from wakelink.app import create_app

    return create_app(context)


@pytest.fixture
def client(app):
    """TestClient sharing one event loop across HTTP and WebSocket calls."""
    with TestClient(app) as test_client:
        yield test_client


def register_device(client, device_id="A", password="foo", mac=MAC, description="Office PC"):
    response = client.post("/register", json={
        "id": device_id,
        "mac_address": mac,
        "description": description,
        "password": password,
    })
    assert response.status_code == 200, response.text
    return response


def wait_for(predicate, timeout=2.0):
    """Poll until *predicate* holds; connection teardown runs asynchronously."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        time.sleep(0.01)
