import asyncio
from typing import AsyncIterator, Awaitable, Callable

from authtrail.app.services import server_state
from authtrail.app.services.audit_broadcaster import AuditEventBroadcaster
from authtrail.app.use_cases.audit import AuditEventView

KEEPALIVE_SECONDS = 15.0


async def audit_event_stream(
    broadcaster: AuditEventBroadcaster,
    queue: asyncio.Queue,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive: float = KEEPALIVE_SECONDS,
) -> AsyncIterator[str]:
    """
    Drain a subscriber queue as server-sent events.

    Sends a comment line when idle so proxies keep the connection open. The
    queue is unsubscribed when the client goes away or the server shuts down.
    """
    try:
        while not server_state.is_shutting_down() and not await is_disconnected():
            try:
                event = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            view = AuditEventView.from_entity(event)
            yield f"event: audit\nid: {view.id}\ndata: {view.model_dump_json()}\n\n"
    finally:
        broadcaster.unsubscribe(queue)
