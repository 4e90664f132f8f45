"""
In-process publish/subscribe channel for scan progress.

Publishers (crawler, spell checker, log writer, orchestrator) push events
without waiting; every subscriber owns a bounded queue that is drained by its
WebSocket connection.  A full queue means a slow observer and the event is
dropped for that observer only.
"""

import asyncio
import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

SCAN_PROGRESS = "scanProgress"
SCAN_COMPLETE = "scanComplete"
SCAN_STATUS = "scanStatus"

_QUEUE_SIZE = 500


class Subscription:
    def __init__(self, broadcaster: "Broadcaster", maxsize: int = _QUEUE_SIZE):
        self._broadcaster = broadcaster
        self.queue: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue(maxsize=maxsize)

    async def get(self) -> Dict[str, Any]:
        return await self.queue.get()

    def close(self) -> None:
        self._broadcaster.unsubscribe(self)


class Broadcaster:
    """Fan-out of scan events to zero or more subscribers."""

    def __init__(self):
        self._subscribers: List[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription:
        subscription = Subscription(self)
        self._subscribers.append(subscription)
        logger.info("Subscriber added. Total subscribers: %d", len(self._subscribers))
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)
            logger.info("Subscriber removed. Remaining subscribers: %d", len(self._subscribers))

    def publish(self, event: str, data: Any) -> int:
        """Queue *event* for every subscriber and return how many accepted it.

        Never blocks and never raises.
        """
        frame = {"event": event, "data": data}
        delivered = 0
        for subscription in list(self._subscribers):
            try:
                subscription.queue.put_nowait(frame)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("Dropping %s event for a slow subscriber", event)
        return delivered

    def progress(self, message: str) -> None:
        logger.info("Emitting %s: %s", SCAN_PROGRESS, message)
        self.publish(SCAN_PROGRESS, message)

    def complete(self, result: Dict[str, Any]) -> None:
        logger.info("Emitting %s", SCAN_COMPLETE)
        self.publish(SCAN_COMPLETE, result)

    def status(self, is_scanning: bool) -> None:
        self.publish(SCAN_STATUS, {"isScanning": is_scanning})
