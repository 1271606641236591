"""Realtime Route - WebSocket endpoint feeding the campus pulse.

Invariants:
    - Every accepted socket is registered with the hub until it disconnects,
      including when the greeting itself fails
    - Inbound messages are read and ignored: the channel is server -> client only
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)
router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket):
    hub = websocket.app.state.hub
    await websocket.accept()
    try:
        await hub.connect(websocket)
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Realtime observer disconnected")
    finally:
        hub.disconnect(websocket)
