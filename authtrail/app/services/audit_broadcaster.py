import asyncio
import logging
from typing import Set

from authtrail.domain.entities import AuditEvent

logger = logging.getLogger(__name__)


class AuditEventBroadcaster:
    """
    In-process fan-out of persisted audit events to live subscribers
    (dashboards, websocket bridges). Slow subscribers lose events rather
    than block the recorder.
    """

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._subscribers: Set[asyncio.Queue] = set()

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def publish(self, event: AuditEvent) -> None:
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(f"Audit subscriber queue full, dropping event {event.id}")
