from datetime import timedelta

import pytest
from httpx import AsyncClient

from authtrail.domain.base import utcnow
from tests.fixtures.users import get_user, refresh_cookie_value


@pytest.mark.asyncio
async def test_successful_login(client: AsyncClient, register_user):
    """Access token in the body, refresh token only in an HttpOnly cookie"""
    await register_user()

    response = await client.post(
        "/auth/login",
        json={"email": "alice@example.com", "password": "SecurePass123!"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["access_token"]
    assert data["token_type"] == "bearer"
    assert "refresh_token" not in data
    assert data["user"]["email"] == "alice@example.com"
    assert "password_hash" not in data["user"]

    cookie = response.headers["set-cookie"]
    assert cookie.startswith("refreshToken=")
    assert "HttpOnly" in cookie
    assert "SameSite=strict" in cookie


@pytest.mark.asyncio
async def test_login_invalid_credentials(client: AsyncClient, register_user):
    await register_user()

    wrong_password = await client.post(
        "/auth/login",
        json={"email": "alice@example.com", "password": "WrongPassword!"},
    )
    unknown_email = await client.post(
        "/auth/login",
        json={"email": "nobody@example.com", "password": "WrongPassword!"},
    )

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_unverified_account(client: AsyncClient, register_user):
    await register_user(verified=False)

    response = await client.post(
        "/auth/login",
        json={"email": "alice@example.com", "password": "SecurePass123!"},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ACCOUNT_UNVERIFIED"


@pytest.mark.asyncio
async def test_lockout_and_recovery(client: AsyncClient, db_session, register_user):
    """Five wrong passwords lock the account; the lock lapses on its own"""
    await register_user()
    bad = {"email": "alice@example.com", "password": "WrongPassword!"}
    good = {"email": "alice@example.com", "password": "SecurePass123!"}

    for _ in range(4):
        response = await client.post("/auth/login", json=bad)
        assert response.status_code == 401

    response = await client.post("/auth/login", json=bad)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ACCOUNT_LOCKED"

    response = await client.post("/auth/login", json=good)
    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "ACCOUNT_LOCKED"
    assert "15 minutes" in error["message"]

    user = await get_user(db_session, "alice@example.com")
    assert user.failed_login_attempts == 5
    user.account_locked_until = utcnow() - timedelta(minutes=1)
    db_session.add(user)
    await db_session.commit()

    response = await client.post("/auth/login", json=good)
    assert response.status_code == 200

    user = await get_user(db_session, "alice@example.com")
    assert user.failed_login_attempts == 0
    assert user.account_locked_until is None
    assert user.last_login_at is not None


@pytest.mark.asyncio
async def test_login_remembers_client_ip(client: AsyncClient, db_session, register_user):
    await register_user()

    await client.post(
        "/auth/login",
        json={"email": "alice@example.com", "password": "SecurePass123!"},
        headers={"X-Forwarded-For": "198.51.100.7"},
    )

    user = await get_user(db_session, "alice@example.com")
    assert user.ip_address == "198.51.100.7"
    assert "198.51.100.7" in user.ip_addresses
