import asyncio
import contextlib
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from app.dependencies import get_broadcaster, get_scan_guard
from app.services.broadcaster import SCAN_STATUS, Broadcaster, Subscription
from app.services.scan_guard import ScanGuard

logger = logging.getLogger(__name__)

router = APIRouter()


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    while True:
        frame = await subscription.get()
        await websocket.send_json(frame)


@router.websocket("/ws")
async def scan_events(
    websocket: WebSocket,
    broadcaster: Broadcaster = Depends(get_broadcaster),
    guard: ScanGuard = Depends(get_scan_guard),
):
    """Stream ``scanProgress`` / ``scanComplete`` / ``scanStatus`` frames to one observer.

    Messages sent by the observer are ignored; reading them is how a closed
    connection is noticed while no scan is running.
    """
    await websocket.accept()
    subscription = broadcaster.subscribe()
    await websocket.send_json({"event": SCAN_STATUS, "data": {"isScanning": guard.is_scanning}})
    forwarder = asyncio.create_task(_forward(websocket, subscription))
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Event observer disconnected")
    finally:
        forwarder.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await forwarder
        subscription.close()
