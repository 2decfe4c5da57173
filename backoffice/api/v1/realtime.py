# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""WebSocket endpoint of the change notification bus."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from backoffice.realtime import change_bus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/realtime")
async def realtime(websocket: WebSocket) -> None:
    """Stream change events to the client.

    Clients only send keep-alive ``"ping"`` frames, answered with ``"pong"``.
    Any other frame, text or binary, is ignored.
    """
    await websocket.accept()
    connection_id = change_bus.connect(websocket.send_json)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if message.get("text") == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        pass
    finally:
        change_bus.disconnect(connection_id)
