"""Configuration loader for wakelink.

Loads settings from a YAML file with built-in defaults. Supports environment
variable overrides using the WAKELINK_ prefix with double-underscore
nesting (e.g., WAKELINK_SERVER__PORT=8080).
"""

from __future__ import annotations

import os
import pathlib
from typing import Any

import yaml
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Config sub-models
# ---------------------------------------------------------------------------

class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 54001
    log_level: str = "info"


class StorageConfig(BaseModel):
    devices_file: str = "devices.json"


class ConnectionsConfig(BaseModel):
    outbox_size: int = 16
    close_superseded: bool = True
    # Protocol-level ping/pong, enforced by uvicorn
    ws_ping_interval: float = 20.0
    ws_ping_timeout: float = 20.0
    # Application-level {"type": "ping"} frames; 0 disables
    keepalive_interval: float = 0
    max_missed_pongs: int = 3


class ApiConfig(BaseModel):
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    connections: ConnectionsConfig = Field(default_factory=ConnectionsConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)


# ---------------------------------------------------------------------------
# Deep merge helper
# ---------------------------------------------------------------------------

def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into *base*, returning a new dict."""
    merged = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------

_ENV_PREFIX = "WAKELINK_"


def _coerce(value: str) -> Any:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    return value


def _collect_env_overrides() -> dict[str, Any]:
    """Collect WAKELINK_* env vars and build a nested dict.

    Double-underscore separates nesting levels.
    Example: WAKELINK_CONNECTIONS__OUTBOX_SIZE=32
    becomes  {"connections": {"outbox_size": 32}}
    """
    overrides: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        parts = key[len(_ENV_PREFIX):].lower().split("__")
        current = overrides
        for part in parts[:-1]:
            current = current.setdefault(part, {})
        current[parts[-1]] = _coerce(value)
    return overrides


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

DEFAULTS_PATH = pathlib.Path(__file__).resolve().parents[3] / "config" / "defaults.yaml"


def load_settings(config_path: pathlib.Path | None = None) -> Settings:
    """Load settings with layered precedence: defaults < file < env vars.

    Parameters
    ----------
    config_path:
        Path to a YAML config file. If ``None`` the bundled defaults file is
        used; a path that does not exist falls back to model defaults.
    """
    base: dict[str, Any] = {}

    path = config_path if config_path is not None else DEFAULTS_PATH
    if path.exists():
        with open(path) as fh:
            file_data = yaml.safe_load(fh)
        if isinstance(file_data, dict):
            base = _deep_merge(base, file_data)

    env_overrides = _collect_env_overrides()
    if env_overrides:
        base = _deep_merge(base, env_overrides)

    return Settings(**base)
