"""Pydantic domain models for wakelink.

Device records are the only persisted structure. Wake requests are built
from management calls and discarded after dispatch. The enums name the
outcomes that flow between the catalog, the dispatcher and the API layer.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class AuthResult(str, Enum):
    UNKNOWN = "unknown"
    DENIED = "denied"
    GRANTED = "granted"


class WakeOutcome(str, Enum):
    DISPATCHED = "dispatched"
    DEVICE_NOT_FOUND = "device_not_found"
    UNAUTHORIZED = "unauthorized"
    DEVICE_OFFLINE = "device_offline"
    DELIVERY_FAILED = "delivery_failed"


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    ESTABLISHED = "established"
    CLOSING = "closing"
    CLOSED = "closed"


# ---------------------------------------------------------------------------
# Domain models
# ---------------------------------------------------------------------------

# Older firmware and admin pages send ``esp_id``.
_DEVICE_ID_ALIASES = AliasChoices("id", "esp_id")

_MAC_RE = re.compile(
    r"^(?:[0-9A-Fa-f]{2}([:-]))(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}$"
    r"|^[0-9A-Fa-f]{12}$"
)


def is_valid_mac(value: str) -> bool:
    """Return True for ``AA:BB:CC:DD:EE:FF``, ``AA-BB-...`` or bare hex."""
    return bool(_MAC_RE.fullmatch(value))


class DeviceRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(validation_alias=_DEVICE_ID_ALIASES)
    mac_address: str
    description: str = ""
    password: str


class WakeRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(validation_alias=_DEVICE_ID_ALIASES)
    password: str
