"""Wakelink server -- entry point.

Usage::

    python -m wakelink [--config PATH] [--host HOST] [--port PORT]

Startup sequence:
    1. Parse CLI arguments
    2. Load configuration from YAML (or defaults)
    3. Build the server context and load registered devices
    4. Create the FastAPI application
    5. Start the uvicorn server
    6. On shutdown signal: close device connections and exit
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import uvicorn

from wakelink.app import create_app  # noqa: F401 -- patched in tests
from wakelink.context import build_context  # noqa: F401 -- patched in tests

logger = logging.getLogger("wakelink")


# ---------------------------------------------------------------------------
# Integration seams -- module-level names so tests can patch them.
# ---------------------------------------------------------------------------


def load_config(config_path: str | None) -> Any:
    """Load settings from a YAML file or return defaults."""
    from wakelink.config import load_settings

    path = Path(config_path) if config_path else None
    return load_settings(config_path=path)


# ---------------------------------------------------------------------------
# CLI argument parsing
# ---------------------------------------------------------------------------


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    argv:
        Argument list.  Defaults to ``sys.argv[1:]`` when ``None``.
    """
    parser = argparse.ArgumentParser(
        prog="wakelink",
        description="Relay wake commands to devices over their WebSocket connection",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Interface to bind (default: from config, 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for the API server (default: from config, 54001)",
    )
    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Main run coroutine
# ---------------------------------------------------------------------------


async def run_server(
    config_path: str | None = None,
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Start the server and run until cancelled."""
    settings = load_config(config_path)
    if host is not None:
        settings.server.host = host
    if port is not None:
        settings.server.port = port

    context = await build_context(settings)
    app = create_app(context)

    uvicorn_config = uvicorn.Config(
        app=app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.server.log_level,
        ws_ping_interval=settings.connections.ws_ping_interval,
        ws_ping_timeout=settings.connections.ws_ping_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    logger.info("Server starting on http://%s:%d", settings.server.host, settings.server.port)
    try:
        await server.serve()
    except asyncio.CancelledError:
        logger.info("Shutdown signal received -- stopping server")
    finally:
        logger.info(
            "Server stopped with %d device(s) connected", len(context.registry)
        )


# ---------------------------------------------------------------------------
# Script entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Parse CLI args and run the server."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    args = parse_args()

    try:
        asyncio.run(run_server(config_path=args.config, host=args.host, port=args.port))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
