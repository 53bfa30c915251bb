"""WebSocket endpoint for device connections.

Protocol:
1. Device connects to ``/ws?id=<device id>`` (``esp_id`` is accepted too)
2. Server accepts and registers the connection under that ID
3. Server pushes ``{"type":"wake","mac_address":"..."}`` frames on demand
4. Device may send ``{"type":"ping"}``; server answers ``{"type":"pong"}``
5. Either side closes; the server deregisters the connection

The claimed ID is not checked against the catalog. Only wake requests are
authenticated.
"""
from __future__ import annotations

from fastapi import APIRouter
from starlette.websockets import WebSocket

from wakelink.connections.lifecycle import DeviceConnection
from wakelink.context import ServerContext

router = APIRouter(tags=["websocket"])


@router.websocket("/ws")
async def device_ws(ws: WebSocket) -> None:
    context: ServerContext = ws.app.state.context
    params = ws.query_params
    device_id = params.get("id", params.get("esp_id", ""))

    settings = context.settings.connections
    connection = DeviceConnection(
        ws,
        device_id,
        context.registry,
        outbox_size=settings.outbox_size,
        close_superseded=settings.close_superseded,
        keepalive_interval=settings.keepalive_interval,
        max_missed_pongs=settings.max_missed_pongs,
    )
    await connection.run()
