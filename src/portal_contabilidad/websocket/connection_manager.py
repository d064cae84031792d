"""WebSocket connection management for screen sessions."""

import json
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks active screen connections and sends state updates to them."""

    def __init__(self) -> None:
        """Initialize connection manager with no connections."""
        self.active_connections: dict[WebSocket, str] = {}

    def count(self, screen: str | None = None) -> int:
        """Number of active connections, optionally for one screen."""
        if screen is None:
            return len(self.active_connections)
        return sum(1 for name in self.active_connections.values() if name == screen)

    async def connect(self, websocket: WebSocket, screen: str) -> None:
        """Accept and register a new screen connection.

        Args:
            websocket: WebSocket connection to register
            screen: Screen served over this connection (e.g. "home")
        """
        await websocket.accept()
        self.active_connections[websocket] = screen
        logger.info(
            f"[ConnectionManager] {screen} screen connected (total: {len(self.active_connections)})"
        )

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove a connection from the active list.

        Args:
            websocket: WebSocket connection to remove
        """
        screen = self.active_connections.pop(websocket, None)
        if screen is not None:
            logger.info(
                f"[ConnectionManager] {screen} screen disconnected "
                f"(total: {len(self.active_connections)})"
            )

    async def send_personal(self, message: dict[str, Any], websocket: WebSocket) -> bool:
        """Send message to a specific client.

        Args:
            message: Dictionary to send as JSON
            websocket: Target WebSocket connection

        Returns:
            False if the client could not be reached and was disconnected
        """
        try:
            await websocket.send_text(json.dumps(message))
            return True
        except Exception as e:
            logger.warning(f"[ConnectionManager] Failed to send message: {e}")
            self.disconnect(websocket)
            return False

    async def close_all(self) -> None:
        """Close every active connection (application shutdown)."""
        for websocket in list(self.active_connections):
            try:
                await websocket.close(code=1001, reason="Server shutting down")
            except Exception as e:
                logger.debug(f"[ConnectionManager] Close failed: {e}")
            self.disconnect(websocket)
