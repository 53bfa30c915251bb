"""JSON file backend for device records.

The whole catalog lives in one pretty-printed JSON object keyed by device
ID. Every save rewrites the file. A missing file is created empty; an
unreadable or corrupt file loads as an empty catalog rather than keeping
the server from starting.
"""

from __future__ import annotations

import json
import logging
import pathlib
from collections.abc import Mapping

from pydantic import ValidationError

from wakelink.devices.store import DeviceStore
from wakelink.errors import PersistError
from wakelink.models import DeviceRecord

logger = logging.getLogger(__name__)


class JsonFileDeviceStore(DeviceStore):
    """Stores device records as a JSON object on disk.

    Parameters
    ----------
    file_path:
        Path to the devices file. Created as ``{}`` on first load if absent.
    """

    def __init__(self, file_path: pathlib.Path) -> None:
        self._path = file_path

    def _read_raw(self) -> dict:
        if not self._path.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text("{}")
            logger.info("Created empty device file at %s", self._path)
            return {}
        try:
            data = json.loads(self._path.read_text())
        except (OSError, ValueError):
            logger.warning("Could not read device file %s, starting empty", self._path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Device file %s does not hold a JSON object, starting empty", self._path)
            return {}
        return data

    async def load(self) -> dict[str, DeviceRecord]:
        devices: dict[str, DeviceRecord] = {}
        for key, entry in self._read_raw().items():
            try:
                record = DeviceRecord.model_validate(entry)
            except ValidationError:
                logger.warning("Skipping malformed device entry %r in %s", key, self._path)
                continue
            devices[record.id] = record
        return devices

    async def save(self, devices: Mapping[str, DeviceRecord]) -> None:
        data = {device_id: record.model_dump() for device_id, record in devices.items()}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, indent=2))
        except OSError as exc:
            raise PersistError(f"Failed to write {self._path}: {exc}") from exc
