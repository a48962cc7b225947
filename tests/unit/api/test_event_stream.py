import json
from unittest.mock import AsyncMock

import pytest

from authtrail.api.utils.event_stream import audit_event_stream
from authtrail.app.services import server_state
from authtrail.app.services.audit_broadcaster import AuditEventBroadcaster
from authtrail.domain.entities import AuditEvent, AuditStatus, EventCategory, SeverityLevel


def make_event() -> AuditEvent:
    return AuditEvent(
        action="login",
        status=AuditStatus.success,
        event_category=EventCategory.authentication,
        severity_level=SeverityLevel.info,
        journey_id="journey",
    )


@pytest.fixture(autouse=True)
def running_server():
    server_state.set_shutting_down(False)
    yield
    server_state.set_shutting_down(False)


@pytest.mark.asyncio
async def test_published_event_is_sent_as_sse():
    broadcaster = AuditEventBroadcaster()
    queue = broadcaster.subscribe()
    event = make_event()
    await broadcaster.publish(event)

    stream = audit_event_stream(broadcaster, queue, AsyncMock(return_value=False))
    chunk = await stream.__anext__()
    await stream.aclose()

    lines = chunk.strip().split("\n")
    assert lines[0] == "event: audit"
    assert lines[1] == f"id: {event.id}"
    payload = json.loads(lines[2][len("data: "):])
    assert payload["action"] == "login"
    assert payload["journey_id"] == "journey"
    assert broadcaster.subscriber_count == 0


@pytest.mark.asyncio
async def test_idle_stream_sends_keepalive():
    broadcaster = AuditEventBroadcaster()
    queue = broadcaster.subscribe()

    stream = audit_event_stream(
        broadcaster, queue, AsyncMock(return_value=False), keepalive=0.01
    )
    chunk = await stream.__anext__()
    await stream.aclose()

    assert chunk == ": keepalive\n\n"


@pytest.mark.asyncio
async def test_disconnect_ends_stream_and_unsubscribes():
    broadcaster = AuditEventBroadcaster()
    queue = broadcaster.subscribe()

    chunks = [
        chunk
        async for chunk in audit_event_stream(
            broadcaster, queue, AsyncMock(return_value=True)
        )
    ]

    assert chunks == []
    assert broadcaster.subscriber_count == 0
