from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from authtrail.app.use_cases.auth import ResendVerificationUseCase, VerifyEmailUseCase
from authtrail.domain.entities import AuditAction, AuditStatus, User

NOW = datetime(2026, 1, 15, 12, 0, 0)


def unverified_user(**overrides) -> User:
    fields = dict(
        id=uuid4(),
        email="alice@example.com",
        is_verified=False,
        verification_token="a" * 40,
        verification_token_expires_at=NOW + timedelta(hours=2),
    )
    fields.update(overrides)
    return User(**fields)


@pytest.mark.asyncio
async def test_verify_email_success(mock_uow, audit_sink):
    user = unverified_user()
    mock_uow.users.get_by_verification_token.return_value = user

    result = await VerifyEmailUseCase(mock_uow, audit_sink, clock=lambda: NOW).execute("a" * 40)

    assert result.is_ok()
    assert result.value.status == "verified"
    assert user.is_verified is True
    assert user.verification_token is None
    assert user.verification_token_expires_at is None
    mock_uow.users.update.assert_called_once_with(user)
    mock_uow.commit.assert_called_once()
    call = audit_sink.record.call_args
    assert call.args[:2] == (AuditAction.verify_email, AuditStatus.success)
    assert call.kwargs["actor_id"] == user.id


@pytest.mark.asyncio
async def test_verify_email_unknown_token(mock_uow, audit_sink):
    mock_uow.users.get_by_verification_token.return_value = None

    result = await VerifyEmailUseCase(mock_uow, audit_sink, clock=lambda: NOW).execute("nope")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    assert result.error.message == "Invalid or expired verification token"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_verify_email_expired_token(mock_uow, audit_sink):
    user = unverified_user(verification_token_expires_at=NOW - timedelta(minutes=1))
    mock_uow.users.get_by_verification_token.return_value = user

    result = await VerifyEmailUseCase(mock_uow, audit_sink, clock=lambda: NOW).execute("a" * 40)

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    assert user.is_verified is False


@pytest.fixture
def resend(mock_uow, audit_sink):
    return ResendVerificationUseCase(
        mock_uow,
        audit_sink,
        frontend_url="http://localhost:3000",
        verification_ttl=timedelta(hours=24),
        clock=lambda: NOW,
    )


@pytest.mark.asyncio
async def test_resend_replaces_token(resend, mock_uow, audit_sink):
    user = unverified_user()
    mock_uow.users.get_by_email.return_value = user

    result = await resend.execute("Alice@Example.com")

    assert result.is_ok()
    assert user.verification_token != "a" * 40
    assert user.verification_token_expires_at == NOW + timedelta(hours=24)
    mock_uow.commit.assert_called_once()
    assert audit_sink.record.call_args.args[:2] == (
        AuditAction.email_verification,
        AuditStatus.pending,
    )


@pytest.mark.asyncio
async def test_resend_unknown_email_looks_the_same(resend, mock_uow, audit_sink):
    mock_uow.users.get_by_email.return_value = None

    result = await resend.execute("ghost@example.com")

    assert result.is_ok()
    mock_uow.commit.assert_not_called()
    audit_sink.record.assert_not_called()


@pytest.mark.asyncio
async def test_resend_already_verified(resend, mock_uow):
    mock_uow.users.get_by_email.return_value = unverified_user(is_verified=True)

    result = await resend.execute("alice@example.com")

    assert result.is_err()
    assert result.error.code == "ALREADY_VERIFIED"
