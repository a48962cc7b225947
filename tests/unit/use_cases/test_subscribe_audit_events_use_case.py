from uuid import uuid4

import pytest

from authtrail.app.services.audit_broadcaster import AuditEventBroadcaster
from authtrail.app.use_cases.audit import SubscribeAuditEventsUseCase
from authtrail.app.use_cases.auth import AuthenticatedUser


def caller(role: str) -> AuthenticatedUser:
    return AuthenticatedUser(id=uuid4(), email="caller@example.com", role=role, token="t")


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["Admin", "Pro User"])
async def test_readers_get_a_queue(role):
    broadcaster = AuditEventBroadcaster()

    result = await SubscribeAuditEventsUseCase(broadcaster).execute(caller(role))

    assert result.is_ok()
    assert broadcaster.subscriber_count == 1
    broadcaster.unsubscribe(result.value)


@pytest.mark.asyncio
async def test_regular_user_is_refused():
    broadcaster = AuditEventBroadcaster()

    result = await SubscribeAuditEventsUseCase(broadcaster).execute(caller("Regular User"))

    assert result.is_err()
    assert result.error.code == "INSUFFICIENT_PERMISSION"
    assert broadcaster.subscriber_count == 0
