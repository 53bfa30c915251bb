"""Shared test fixtures for wakelink tests."""

import pathlib

import pytest

from wakelink.models import DeviceRecord

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]

MAC = "AA:BB:CC:DD:EE:FF"


@pytest.fixture
def repo_root() -> pathlib.Path:
    return REPO_ROOT


@pytest.fixture
def make_record():
    """Factory for device records with sensible defaults."""

    def _make(device_id: str = "A", password: str = "foo", mac: str = MAC,
              description: str = "Office PC") -> DeviceRecord:
        return DeviceRecord(id=device_id, mac_address=mac, description=description, password=password)

    return _make
