import logging
from typing import List

from fastapi import WebSocket

logger = logging.getLogger(__name__)

class ConnectionManager:
    """Fan-out of activity events to connected WebSocket clients."""

    def __init__(self):
        self.activity_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.activity_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.activity_connections:
            self.activity_connections.remove(websocket)

    async def broadcast(self, message: dict):
        for connection in list(self.activity_connections):
            try:
                await connection.send_json(message)
            except RuntimeError:
                logger.debug("dropping closed activity socket")
                self.disconnect(connection)

manager = ConnectionManager()
