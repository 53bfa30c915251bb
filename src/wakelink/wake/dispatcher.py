"""Wake dispatcher -- authenticates a wake request and pushes the command.

Delivery is best-effort and at-most-once: one send attempt, no retry. The
caller gets back a :class:`WakeOutcome` and decides what to do with it.
"""

from __future__ import annotations

import json
import logging

from wakelink.connections.registry import ConnectionRegistry
from wakelink.devices.catalog import DeviceCatalog
from wakelink.errors import DeliveryError
from wakelink.models import AuthResult, WakeOutcome, WakeRequest

logger = logging.getLogger(__name__)


def build_wake_command(mac_address: str) -> str:
    """Encode the wake frame exactly as devices expect it."""
    return json.dumps({"type": "wake", "mac_address": mac_address}, separators=(",", ":"))


class WakeDispatcher:
    """Routes wake requests from the management API to live connections.

    The catalog lock is released before the registry is consulted; the two
    are never held together.
    """

    def __init__(self, catalog: DeviceCatalog, registry: ConnectionRegistry) -> None:
        self._catalog = catalog
        self._registry = registry

    async def dispatch(self, request: WakeRequest) -> WakeOutcome:
        auth = await self._catalog.authenticate(request.id, request.password)
        if auth is AuthResult.UNKNOWN:
            logger.info("Wake rejected, device not found: id=%r", request.id)
            return WakeOutcome.DEVICE_NOT_FOUND
        if auth is AuthResult.DENIED:
            logger.info("Wake rejected, password mismatch: id=%r", request.id)
            return WakeOutcome.UNAUTHORIZED

        record = await self._catalog.lookup(request.id)
        if record is None:
            return WakeOutcome.DEVICE_NOT_FOUND

        handle = self._registry.lookup(request.id)
        if handle is None:
            logger.info("Wake not sent, device offline: id=%r", request.id)
            return WakeOutcome.DEVICE_OFFLINE

        try:
            handle.try_send(build_wake_command(record.mac_address))
        except DeliveryError as exc:
            logger.warning("Failed to send wake command to %r: %s", request.id, exc)
            return WakeOutcome.DELIVERY_FAILED

        logger.info("Wake command sent: id=%r mac=%s", request.id, record.mac_address)
        return WakeOutcome.DISPATCHED
