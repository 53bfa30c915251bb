"""Sending end of one device connection's outbound channel."""

from __future__ import annotations

import asyncio
from uuid import uuid4

from wakelink.errors import ConnectionClosedError, OutboxFullError

DEFAULT_OUTBOX_SIZE = 16


class ConnectionHandle:
    """Bounded outbox that other tasks use to push frames to a connection.

    The connection's writer task drains the outbox with
    :meth:`next_outbound`; everyone else only ever calls :meth:`try_send`,
    which never waits. Handles compare by identity.
    """

    def __init__(self, device_id: str, max_pending: int = DEFAULT_OUTBOX_SIZE) -> None:
        self.device_id = device_id
        self.handle_id = uuid4().hex[:12]
        self._outbox: asyncio.Queue[str] = asyncio.Queue(maxsize=max_pending)
        self._closed = asyncio.Event()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<ConnectionHandle {self.device_id!r} {self.handle_id} {state}>"

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def pending(self) -> int:
        return self._outbox.qsize()

    def try_send(self, text: str) -> None:
        """Queue *text* for delivery without blocking.

        Raises ``ConnectionClosedError`` once the handle is closed and
        ``OutboxFullError`` when the writer has fallen behind.
        """
        if self.closed:
            raise ConnectionClosedError(f"connection {self.handle_id} for {self.device_id!r} is closed")
        try:
            self._outbox.put_nowait(text)
        except asyncio.QueueFull:
            raise OutboxFullError(
                f"outbox for {self.device_id!r} is full ({self._outbox.maxsize} pending)"
            ) from None

    def close(self) -> None:
        """Stop accepting frames and wake the writer so it can shut down."""
        self._closed.set()

    async def next_outbound(self) -> str | None:
        """Wait for the next queued frame. Returns None once closed."""
        if self.closed:
            return None
        if not self._outbox.empty():
            return self._outbox.get_nowait()

        getter = asyncio.ensure_future(self._outbox.get())
        closer = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait({getter, closer}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (getter, closer):
                if not task.done():
                    task.cancel()
        if getter.done() and not getter.cancelled():
            return getter.result()
        return None
