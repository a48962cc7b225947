import pytest
from unittest.mock import AsyncMock, MagicMock

from authtrail.app.services.audit_sink import AuditSink


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    for name in (
        "get_by_email",
        "get_by_id",
        "get_by_username",
        "get_by_verification_token",
        "create",
        "update",
        "record_failed_login",
        "lock_account",
        "reset_login_failures",
    ):
        setattr(uow.users, name, AsyncMock())

    uow.audit_events = MagicMock()
    for name in ("create", "find", "delete_between", "count_by", "time_bounds", "distinct_values"):
        setattr(uow.audit_events, name, AsyncMock())

    uow.revoked_tokens = MagicMock()
    uow.revoked_tokens.add = AsyncMock()
    uow.revoked_tokens.is_revoked = AsyncMock(return_value=False)
    uow.revoked_tokens.purge_expired = AsyncMock(return_value=0)
    return uow


@pytest.fixture
def audit_sink():
    return MagicMock(spec=AuditSink)
