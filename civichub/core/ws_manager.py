"""WebSocket connection manager for cache-invalidation events."""

import json
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks active WebSocket connections keyed by user email."""

    def __init__(self) -> None:
        self._connections: dict[str, set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, email: str) -> None:
        await websocket.accept()
        self._connections.setdefault(email, set()).add(websocket)
        logger.info("WS connected: user=%s (total=%s)", email, self.total_connections)

    def disconnect(self, websocket: WebSocket, email: str) -> None:
        conns = self._connections.get(email)
        if conns:
            conns.discard(websocket)
            if not conns:
                del self._connections[email]
        logger.info("WS disconnected: user=%s (total=%s)", email, self.total_connections)

    async def broadcast(self, event: str, data: Any) -> None:
        """Send an event to every connected client; dead sockets are dropped."""
        payload = json.dumps({"event": event, "data": data}, default=str)
        for email, conns in list(self._connections.items()):
            for ws in list(conns):
                try:
                    await ws.send_text(payload)
                except Exception:  # noqa: BLE001 - any send failure means the socket is gone
                    logger.debug("Dropping dead socket for %s", email)
                    self.disconnect(ws, email)

    @property
    def total_connections(self) -> int:
        return sum(len(c) for c in self._connections.values())


ws_manager = ConnectionManager()


async def notify_report_changed(event: str, report_id: int) -> None:
    """Tell clients to refetch views that include ``report_id``."""
    await ws_manager.broadcast(event, {"report_id": report_id})
