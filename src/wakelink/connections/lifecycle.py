"""Per-connection state machine for device WebSockets.

States::

    CONNECTING --accept--> ESTABLISHED --close/timeout/error--> CLOSING --> CLOSED

A connection registers its handle when it becomes ESTABLISHED and
deregisters that same handle the moment it starts closing. While
established, three tasks run side by side:

  reader     -- answers application pings, tracks liveness, detects close
  writer     -- drains the handle's outbox, one text frame per command
  keepalive  -- optional; pings the device and gives up after missed pongs

Protocol-level ping/pong and close acknowledgement are handled by the ASGI
server itself (see ``connections.ws_ping_interval``).
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from starlette.websockets import WebSocket, WebSocketState

from wakelink.connections.handle import DEFAULT_OUTBOX_SIZE, ConnectionHandle
from wakelink.connections.registry import ConnectionRegistry
from wakelink.models import ConnectionState

logger = logging.getLogger(__name__)

MAX_MISSED_PONGS = 3


class DeviceConnection:
    """Drives one device WebSocket from accept to close.

    Parameters
    ----------
    websocket:
        The not yet accepted WebSocket.
    device_id:
        The ID the device claimed when connecting. Not verified.
    registry:
        Registry that receives this connection's handle while established.
    close_superseded:
        Close an older connection registered under the same ID.
    keepalive_interval:
        Seconds between application pings; 0 disables the keepalive task.
    """

    def __init__(
        self,
        websocket: WebSocket,
        device_id: str,
        registry: ConnectionRegistry,
        *,
        outbox_size: int = DEFAULT_OUTBOX_SIZE,
        close_superseded: bool = True,
        keepalive_interval: float = 0,
        max_missed_pongs: int = MAX_MISSED_PONGS,
    ) -> None:
        self.websocket = websocket
        self.device_id = device_id
        self.handle = ConnectionHandle(device_id, max_pending=outbox_size)
        self.state = ConnectionState.CONNECTING
        self.missed_pongs = 0
        self._registry = registry
        self._close_superseded = close_superseded
        self._keepalive_interval = keepalive_interval
        self._max_missed_pongs = max_missed_pongs
        self._peer_closed = False
        self._send_lock = asyncio.Lock()

    async def run(self) -> None:
        """Accept, serve until any task ends, then tear down."""
        try:
            await self.websocket.accept()
        except Exception:
            self.state = ConnectionState.CLOSED
            logger.warning("Handshake failed for device %r", self.device_id, exc_info=True)
            return

        self.state = ConnectionState.ESTABLISHED
        previous = self._registry.register(self.device_id, self.handle)
        logger.info("Device connected: id=%r handle=%s", self.device_id, self.handle.handle_id)
        if previous is not None and self._close_superseded:
            previous.close()

        tasks = [
            asyncio.create_task(self._read_loop(), name=f"ws-read-{self.handle.handle_id}"),
            asyncio.create_task(self._write_loop(), name=f"ws-write-{self.handle.handle_id}"),
        ]
        if self._keepalive_interval > 0:
            tasks.append(
                asyncio.create_task(self._keepalive_loop(), name=f"ws-ping-{self.handle.handle_id}")
            )

        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                if not task.cancelled() and task.exception() is not None:
                    logger.warning(
                        "Connection for device %r failed: %r", self.device_id, task.exception()
                    )
        finally:
            # Nothing may await before the handle is gone from the registry.
            # A cancelled task can be cancelled again at every later await.
            self.state = ConnectionState.CLOSING
            self.handle.close()
            self._registry.deregister(self.device_id, self.handle)
            for task in tasks:
                task.cancel()
            try:
                await asyncio.gather(*tasks, return_exceptions=True)
                await self._send_close()
            finally:
                self.state = ConnectionState.CLOSED
                logger.info("Device disconnected: id=%r handle=%s", self.device_id, self.handle.handle_id)

    async def _send_close(self) -> None:
        if self._peer_closed or self.websocket.application_state != WebSocketState.CONNECTED:
            return
        try:
            await self.websocket.close()
        except Exception:
            logger.debug("Close frame not delivered to device %r", self.device_id, exc_info=True)

    async def send_text(self, text: str) -> None:
        async with self._send_lock:
            await self.websocket.send_text(text)

    async def _read_loop(self) -> None:
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                self._peer_closed = True
                return
            self.missed_pongs = 0
            text = message.get("text")
            if text is not None:
                await self._handle_text(text)

    async def _handle_text(self, text: str) -> None:
        try:
            frame: Any = json.loads(text)
        except ValueError:
            logger.debug("Ignoring non-JSON frame from device %r", self.device_id)
            return
        if not isinstance(frame, dict):
            return

        frame_type = frame.get("type")
        if frame_type == "ping":
            await self.send_text(json.dumps({**frame, "type": "pong"}))
        elif frame_type != "pong":
            # Devices are send targets only; nothing inbound is actionable.
            logger.debug("Ignoring %r frame from device %r", frame_type, self.device_id)

    async def _write_loop(self) -> None:
        while True:
            text = await self.handle.next_outbound()
            if text is None:
                return
            await self.send_text(text)

    async def _keepalive_loop(self) -> None:
        """Ping every interval. Return after too many unanswered pings."""
        while True:
            await asyncio.sleep(self._keepalive_interval)
            if self.missed_pongs >= self._max_missed_pongs:
                logger.info("Device %r missed %d pongs, closing", self.device_id, self.missed_pongs)
                return
            await self.send_text(json.dumps({"type": "ping"}))
            self.missed_pongs += 1
