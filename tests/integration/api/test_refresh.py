import pytest
from httpx import AsyncClient

from tests.fixtures.users import refresh_cookie_value


async def login_cookie(client: AsyncClient) -> str:
    response = await client.post(
        "/auth/login",
        json={"email": "alice@example.com", "password": "SecurePass123!"},
    )
    assert response.status_code == 200
    return refresh_cookie_value(response)


@pytest.mark.asyncio
async def test_refresh_without_cookie(client: AsyncClient):
    client.cookies.clear()

    response = await client.post("/auth/refresh-token")

    assert response.status_code == 401
    error = response.json()["error"]
    assert error["code"] == "TOKEN_MISSING"
    assert error["message"] == "Refresh token is required"


@pytest.mark.asyncio
async def test_refresh_issues_access_token(client: AsyncClient, register_user):
    await register_user()
    refresh_token = await login_cookie(client)

    response = await client.post(
        "/auth/refresh-token", headers={"Cookie": f"refreshToken={refresh_token}"}
    )

    assert response.status_code == 200
    access_token = response.json()["access_token"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {access_token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "alice@example.com"


@pytest.mark.asyncio
async def test_refresh_with_access_token_rejected(client: AsyncClient, register_user, login):
    await register_user()
    headers = await login()
    access_token = headers["Authorization"].split(" ", 1)[1]

    response = await client.post(
        "/auth/refresh-token", headers={"Cookie": f"refreshToken={access_token}"}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "NOT_AUTHORIZED"


@pytest.mark.asyncio
async def test_logout_revokes_tokens(client: AsyncClient, register_user):
    await register_user()
    login_response = await client.post(
        "/auth/login",
        json={"email": "alice@example.com", "password": "SecurePass123!"},
    )
    access_token = login_response.json()["access_token"]
    refresh_token = refresh_cookie_value(login_response)
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Cookie": f"refreshToken={refresh_token}",
    }

    response = await client.post("/auth/logout", headers=headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("refreshToken=")
    assert "Max-Age=0" in cookie

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {access_token}"})
    assert me.status_code == 401
    assert me.json()["error"]["code"] == "NOT_AUTHORIZED"

    refresh = await client.post(
        "/auth/refresh-token", headers={"Cookie": f"refreshToken={refresh_token}"}
    )
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_logout_without_token_succeeds(client: AsyncClient):
    client.cookies.clear()

    response = await client.post("/auth/logout")

    assert response.status_code == 200
