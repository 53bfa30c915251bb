"""Authoritative in-memory catalog of registered devices.

The catalog owns the device ID -> record mapping. Every mutation writes the
complete mapping back through the :class:`DeviceStore`. A failed write is
reported to the caller but not rolled back: the record stays live in memory
for the rest of the process lifetime.
"""

from __future__ import annotations

import asyncio
import hmac
import logging

from wakelink.devices.store import DeviceStore
from wakelink.models import AuthResult, DeviceRecord

logger = logging.getLogger(__name__)


class DeviceCatalog:
    """Device records guarded by a single asyncio lock.

    The store write happens while the lock is held, so readers wait for
    disk I/O during a registration.

    Parameters
    ----------
    store:
        Persistence backend receiving a full snapshot on every upsert.
    """

    def __init__(self, store: DeviceStore) -> None:
        self._store = store
        self._devices: dict[str, DeviceRecord] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._devices)

    async def load(self) -> int:
        """Replace the in-memory mapping with the store's contents."""
        devices = await self._store.load()
        async with self._lock:
            self._devices = dict(devices)
        logger.info("Loaded %d registered devices", len(devices))
        return len(devices)

    async def upsert(self, record: DeviceRecord) -> None:
        """Insert or replace *record*, then persist the whole mapping.

        Raises ``PersistError`` if the store write fails; the in-memory
        mapping keeps the new record either way.
        """
        async with self._lock:
            replaced = record.id in self._devices
            self._devices[record.id] = record
            await self._store.save(dict(self._devices))
        logger.info(
            "Device %s: id=%r mac=%s",
            "updated" if replaced else "registered", record.id, record.mac_address,
        )

    async def list_all(self) -> list[DeviceRecord]:
        async with self._lock:
            return list(self._devices.values())

    async def lookup(self, device_id: str) -> DeviceRecord | None:
        async with self._lock:
            return self._devices.get(device_id)

    async def authenticate(self, device_id: str, secret: str) -> AuthResult:
        """Check *secret* against the stored password, byte for byte."""
        async with self._lock:
            record = self._devices.get(device_id)
        if record is None:
            return AuthResult.UNKNOWN
        if not hmac.compare_digest(record.password.encode("utf-8"), secret.encode("utf-8")):
            return AuthResult.DENIED
        return AuthResult.GRANTED
