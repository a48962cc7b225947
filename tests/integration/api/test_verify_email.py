import pytest
from httpx import AsyncClient

from tests.fixtures.users import get_user


async def register(client: AsyncClient):
    response = await client.post(
        "/auth/register",
        json={
            "first_name": "Alice",
            "last_name": "Example",
            "email": "alice@example.com",
            "password": "SecurePass123!",
        },
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_verify_email_then_login(client: AsyncClient, db_session):
    await register(client)
    user = await get_user(db_session, "alice@example.com")

    response = await client.get(f"/auth/verify-email/{user.verification_token}")

    assert response.status_code == 200
    assert response.json()["status"] == "verified"

    user = await get_user(db_session, "alice@example.com")
    assert user.is_verified is True
    assert user.verification_token is None

    login = await client.post(
        "/auth/login",
        json={"email": "alice@example.com", "password": "SecurePass123!"},
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_verify_email_unknown_token(client: AsyncClient):
    response = await client.get("/auth/verify-email/not-a-real-token")

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_TOKEN"
    assert error["message"] == "Invalid or expired verification token"


@pytest.mark.asyncio
async def test_resend_verification_rotates_token(client: AsyncClient, db_session):
    await register(client)
    before = (await get_user(db_session, "alice@example.com")).verification_token

    response = await client.post(
        "/auth/resend-verification", json={"email": "alice@example.com"}
    )

    assert response.status_code == 200
    after = (await get_user(db_session, "alice@example.com")).verification_token
    assert after and after != before


@pytest.mark.asyncio
async def test_resend_verification_unknown_email(client: AsyncClient):
    response = await client.post(
        "/auth/resend-verification", json={"email": "nobody@example.com"}
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_resend_verification_already_verified(client: AsyncClient, register_user):
    await register_user()

    response = await client.post(
        "/auth/resend-verification", json={"email": "alice@example.com"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ALREADY_VERIFIED"
