"""WebSocket endpoint: echo loop + change notifications.

Learn: Each client connects to /ws. The handler:
1. Accepts the upgrade and registers a Connection with the registry
2. Echoes every data frame back verbatim (text stays text, bytes stay bytes)
3. Unregisters on close frame, disconnect, or any send/receive error

Broadcasts from CRUD handlers arrive on the same socket, interleaved with
echoes. Clients never get an error frame; a broken connection is simply
dropped.

This is a long-lived connection and holds one concurrency slot on the
server for as long as it stays open.
"""

import structlog
from fastapi import APIRouter, Depends, Request, WebSocket

from todoserver.realtime.registry import Connection, ConnectionRegistry, get_registry

logger = structlog.get_logger()
router = APIRouter()


class ProtocolError(Exception):
    """Raised when a request to /ws is not a valid WebSocket handshake."""
    pass


@router.websocket("/ws")
async def todo_websocket(
    websocket: WebSocket,
    registry: ConnectionRegistry = Depends(get_registry),
):
    await websocket.accept()
    conn = Connection(websocket)
    client = websocket.client
    logger.info(
        "ws.connected",
        conn_id=conn.id,
        client=f"{client.host}:{client.port}" if client else None,
    )
    await registry.register(conn)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if message.get("text") is not None:
                await websocket.send_text(message["text"])
            elif message.get("bytes") is not None:
                await websocket.send_bytes(message["bytes"])
    except Exception as e:
        logger.info("ws.connection_error", conn_id=conn.id, error=str(e))
    finally:
        await registry.unregister(conn)
        logger.info("ws.closed", conn_id=conn.id)


@router.get("/ws", include_in_schema=False)
async def websocket_handshake_required(request: Request):
    """Plain HTTP GET on /ws: the upgrade handshake did not happen."""
    if request.headers.get("upgrade", "").lower() != "websocket":
        raise ProtocolError("Missing 'Upgrade: websocket' header in handshake request")
    raise ProtocolError("WebSocket upgrade could not be completed")
