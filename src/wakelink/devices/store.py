"""Abstract interface for device record persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from wakelink.models import DeviceRecord


class DeviceStore(ABC):
    """Abstract device store with whole-snapshot semantics.

    ``save`` always receives the complete mapping; backends never see
    partial updates. Methods are async so that blocking and non-blocking
    backends share one interface.
    """

    @abstractmethod
    async def load(self) -> dict[str, DeviceRecord]:
        """Return every persisted record keyed by device ID."""

    @abstractmethod
    async def save(self, devices: Mapping[str, DeviceRecord]) -> None:
        """Replace the persisted snapshot. Raises ``PersistError`` on failure."""
