"""Registry of live device connections.

Maps a device ID to the handle of the connection currently open under that
ID. The registry holds no ownership over connections: each connection's
lifecycle registers itself once established and deregisters itself when
closed, passing its own handle so that a late-closing stale connection
cannot evict a newer one.
"""

from __future__ import annotations

import logging
import threading

from wakelink.connections.handle import ConnectionHandle

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Device ID -> :class:`ConnectionHandle`, last writer wins.

    Guarded by its own lock, held only for the dict operation and never
    together with the catalog's lock.
    """

    def __init__(self) -> None:
        self._connections: dict[str, ConnectionHandle] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def __contains__(self, device_id: object) -> bool:
        with self._lock:
            return device_id in self._connections

    def register(self, device_id: str, handle: ConnectionHandle) -> ConnectionHandle | None:
        """Insert or replace the entry for *device_id*.

        Returns the handle that was replaced, if any. The previous holder
        is not notified here; closing it is the caller's decision.
        """
        with self._lock:
            previous = self._connections.get(device_id)
            self._connections[device_id] = handle
        if previous is not None and previous is not handle:
            logger.info("Connection %s supersedes %s for device %r",
                        handle.handle_id, previous.handle_id, device_id)
            return previous
        return None

    def deregister(self, device_id: str, handle: ConnectionHandle) -> bool:
        """Remove the entry only if it still points at *handle*."""
        with self._lock:
            if self._connections.get(device_id) is not handle:
                return False
            del self._connections[device_id]
        return True

    def lookup(self, device_id: str) -> ConnectionHandle | None:
        with self._lock:
            return self._connections.get(device_id)

    def connected_ids(self) -> list[str]:
        with self._lock:
            return list(self._connections)
