"""Connection registry: the set of open WebSockets and broadcast fan-out.

Learn: The registry never holds a raw socket. It holds Connection handles,
and releasing a handle (closing its socket) happens exactly once, inside
unregister(), no matter how many code paths race to drop it: the echo
loop's finally block, a failed broadcast send, or app shutdown.

The asyncio.Lock only guards set membership. Sends and closes run against
a snapshot taken under the lock; the lock is never held across I/O.
"""

import asyncio
import uuid

import structlog
from starlette.requests import HTTPConnection
from starlette.websockets import WebSocket, WebSocketState

logger = structlog.get_logger()


class Connection:
    """Registry handle wrapping one accepted WebSocket."""

    def __init__(self, websocket: WebSocket):
        self.id = uuid.uuid4().hex
        self.websocket = websocket
        self.released = False

    async def send(self, message: str) -> None:
        await self.websocket.send_text(message)

    async def release(self) -> None:
        """Close the underlying socket if it is still open."""
        if self.released:
            return
        self.released = True
        if self.websocket.client_state == WebSocketState.CONNECTED:
            try:
                await self.websocket.close()
            except Exception as e:
                # Peer already gone; nothing left to release
                logger.debug("ws.close_failed", conn_id=self.id, error=str(e))

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r}, released={self.released})"


class ConnectionRegistry:
    """Set of open connections with best-effort broadcast."""

    def __init__(self):
        self._connections: set[Connection] = set()
        self._lock = asyncio.Lock()

    async def register(self, conn: Connection) -> None:
        async with self._lock:
            self._connections.add(conn)
            total = len(self._connections)
        logger.info("ws.registered", conn_id=conn.id, connections=total)

    async def unregister(self, conn: Connection) -> bool:
        """Remove and release a connection. Returns False if it was already gone."""
        async with self._lock:
            if conn not in self._connections:
                return False
            self._connections.discard(conn)
            total = len(self._connections)
        await conn.release()
        logger.info("ws.unregistered", conn_id=conn.id, connections=total)
        return True

    async def broadcast(self, message: str) -> int:
        """Send message to every open connection. Returns the delivery count.

        A failed send unregisters that connection and moves on; it never
        stops delivery to the rest and never raises to the caller.
        """
        async with self._lock:
            targets = list(self._connections)

        delivered = 0
        for conn in targets:
            try:
                await conn.send(message)
                delivered += 1
            except Exception as e:
                logger.warning("ws.broadcast_failed", conn_id=conn.id, error=str(e))
                await self.unregister(conn)
        return delivered

    async def close_all(self) -> None:
        """Unregister every connection (used on shutdown)."""
        async with self._lock:
            targets = list(self._connections)
        for conn in targets:
            await self.unregister(conn)

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, conn: Connection) -> bool:
        return conn in self._connections


def get_registry(conn: HTTPConnection) -> ConnectionRegistry:
    """FastAPI dependency: the registry owned by the running app."""
    return conn.app.state.registry
