import hashlib
from contextlib import asynccontextmanager
from datetime import datetime
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from authtrail.app.services import server_state
from authtrail.app.services.audit_broadcaster import AuditEventBroadcaster
from authtrail.app.services.audit_recorder import AuditRecorder, derive_journey_id
from authtrail.app.services.request_context import RequestContext
from authtrail.domain.entities import AuditStatus, EventCategory, SeverityLevel

NOW = datetime(2026, 1, 15, 12, 34, 56)

CONTEXT = RequestContext(
    ip_address="10.0.0.1",
    user_agent="Mozilla/5.0 (X11; Linux x86_64) Firefox/121.0",
    endpoint="/auth/me",
    method="PUT",
)


@pytest.fixture(autouse=True)
def running_server():
    server_state.set_shutting_down(False)
    yield
    server_state.set_shutting_down(False)


@pytest.fixture
def recorder(mock_uow):
    @asynccontextmanager
    async def factory():
        yield mock_uow

    async def create(event):
        return event

    mock_uow.audit_events.create.side_effect = create
    return AuditRecorder(factory, clock=lambda: NOW)


def stored_event(mock_uow):
    return mock_uow.audit_events.create.call_args.args[0]


@pytest.mark.asyncio
async def test_records_derived_fields(recorder, mock_uow):
    user_id = uuid4()

    event = await recorder.record(
        CONTEXT,
        "profile_update",
        AuditStatus.success,
        actor_id=user_id,
        before={"first_name": "Alice", "password": "old", "city": "Porto"},
        after={"first_name": "Alicia", "password": "new", "city": "Porto"},
        resource_type="user",
        resource_id=user_id,
    )

    assert event is stored_event(mock_uow)
    mock_uow.commit.assert_called_once()
    assert event.user_id == user_id
    assert event.action == "profile_update"
    assert event.event_category == EventCategory.data_modification
    assert event.severity_level == SeverityLevel.info
    assert event.changed_fields == ["first_name"]
    assert event.before_state == {"first_name": "Alice"}
    assert event.after_state == {"first_name": "Alicia"}
    assert event.resource_id == str(user_id)
    assert event.client_info["browser"] == "Firefox"
    assert event.endpoint == "/auth/me"
    assert event.method == "PUT"
    assert event.timestamp == NOW


@pytest.mark.asyncio
async def test_failed_login_is_critical(recorder, mock_uow):
    event = await recorder.record(CONTEXT, "login", AuditStatus.failed)

    assert event.user_id is None
    assert event.severity_level == SeverityLevel.critical


@pytest.mark.asyncio
async def test_unknown_action_is_not_stored(recorder, mock_uow):
    event = await recorder.record(CONTEXT, "user_login", AuditStatus.success, actor_id=uuid4())

    assert event is None
    mock_uow.audit_events.create.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["login", "register", "verify-email"])
async def test_anonymous_allowed_actions(recorder, mock_uow, action):
    event = await recorder.record(CONTEXT, action, AuditStatus.failed)

    assert event is not None
    assert event.user_id is None


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["logout", "profile_update", "audit_purge", "token_refresh"])
async def test_anonymous_other_actions_are_dropped(recorder, mock_uow, action):
    event = await recorder.record(CONTEXT, action, AuditStatus.success)

    assert event is None
    mock_uow.audit_events.create.assert_not_called()


@pytest.mark.asyncio
async def test_actor_is_passed_explicitly(recorder):
    user_id = uuid4()

    event = await recorder.record(CONTEXT, "logout", AuditStatus.success, actor_id=user_id)

    assert event.user_id == user_id


@pytest.mark.asyncio
async def test_storage_failure_is_swallowed(recorder, mock_uow):
    mock_uow.audit_events.create.side_effect = OperationalError("INSERT", {}, Exception("db down"))

    event = await recorder.record(CONTEXT, "login", AuditStatus.success, actor_id=uuid4())

    assert event is None
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_no_op_during_shutdown(recorder, mock_uow):
    server_state.set_shutting_down(True)

    event = await recorder.record(CONTEXT, "login", AuditStatus.success, actor_id=uuid4())

    assert event is None
    mock_uow.audit_events.create.assert_not_called()


@pytest.mark.asyncio
async def test_broadcasts_after_storing(mock_uow):
    @asynccontextmanager
    async def factory():
        yield mock_uow

    broadcaster = AuditEventBroadcaster()
    queue = broadcaster.subscribe()
    recorder = AuditRecorder(factory, broadcaster=broadcaster, clock=lambda: NOW)

    event = await recorder.record(CONTEXT, "login", AuditStatus.success, actor_id=uuid4())

    assert queue.get_nowait() is event
    broadcaster.unsubscribe(queue)
    assert broadcaster.subscriber_count == 0


def test_journey_id_is_stable_within_the_hour():
    user_id = uuid4()
    same_hour = datetime(2026, 1, 15, 12, 59, 59)
    next_hour = datetime(2026, 1, 15, 13, 0, 0)

    first = derive_journey_id(CONTEXT, user_id, NOW)

    assert first == derive_journey_id(CONTEXT, user_id, same_hour)
    assert first != derive_journey_id(CONTEXT, user_id, next_hour)
    expected = hashlib.sha256(f"{user_id}:10.0.0.1:2026-01-15T12".encode()).hexdigest()[:32]
    assert first == expected


def test_explicit_journey_id_wins():
    context = RequestContext(ip_address="10.0.0.1", journey_id="client-journey")

    assert derive_journey_id(context, uuid4(), NOW) == "client-journey"


def test_anonymous_journey_ids_are_random():
    assert derive_journey_id(CONTEXT, None, NOW) != derive_journey_id(CONTEXT, None, NOW)
