import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from taskboard.core.websocket import manager

logger = logging.getLogger(__name__)

router = APIRouter()

@router.websocket("/ws/activity")
async def activity_endpoint(websocket: WebSocket):
    await manager.connect(websocket)
    logger.info("activity subscriber connected")
    try:
        while True:
            # clients only listen; inbound frames keep the socket alive
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("activity subscriber disconnected")
        manager.disconnect(websocket)
