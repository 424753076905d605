"""
Authentication Tests
====================

Registration, login, logout, password changes and session resolution
through the HTTP API.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select, update

from deskflow.config import settings
from deskflow.models.account import Account, Profile
from tests.conftest import DEFAULT_PASSWORD, register

COOKIE = settings.SESSION_COOKIE_NAME


async def _login(client: AsyncClient, email: str, password: str = DEFAULT_PASSWORD):
    return await client.post("/api/v1/auth/login", json={"email": email, "password": password})


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_creates_account_and_profile(self, client: AsyncClient, db_session):
        response = await register(client, email="  Ana@Example.COM ")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Account created successfully"
        assert body["data"]["account"]["email"] == "ana@example.com"
        assert body["data"]["account"]["displayName"] == "Ana"

        account = await db_session.scalar(select(Account))
        assert account.password_hash != DEFAULT_PASSWORD
        assert account.password_hash.startswith("$2b$12$")
        profile = await db_session.get(Profile, account.profile_id)
        assert profile.display_name == "Ana"
        assert profile.dark_mode is False

    @pytest.mark.asyncio
    async def test_register_sets_session_cookie(self, client: AsyncClient):
        response = await register(client)

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{COOKIE}=")
        assert "HttpOnly" in set_cookie
        assert "Path=/" in set_cookie
        assert "samesite=lax" in set_cookie.lower()
        assert f"Max-Age={7 * 24 * 3600}" in set_cookie

    @pytest.mark.asyncio
    async def test_register_duplicate_email_case_insensitive(self, client: AsyncClient):
        await register(client, email="ana@example.com")
        response = await register(client, email="ANA@example.com")

        assert response.status_code == 409
        assert response.json()["error"]["message"] == "Email is already registered"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "", "password": DEFAULT_PASSWORD, "displayName": "Ana"},
            {"email": "ana@example.com", "password": "", "displayName": "Ana"},
            {"email": "ana@example.com", "password": DEFAULT_PASSWORD, "displayName": "   "},
            {"email": "ana@example.com"},
        ],
    )
    async def test_register_missing_fields(self, client: AsyncClient, payload):
        response = await client.post("/api/v1/auth/register", json=payload)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "All fields are required"

    @pytest.mark.asyncio
    async def test_register_short_password(self, client: AsyncClient):
        response = await register(client, password="12345")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Password must be at least 6 characters long"

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, client: AsyncClient):
        response = await register(client, email="not-an-email")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid email format"


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, db_session):
        await register(client)
        client.cookies.clear()

        response = await _login(client, "ANA@example.com ")

        assert response.status_code == 200
        assert response.json()["data"]["account"]["email"] == "ana@example.com"
        assert COOKIE in response.cookies

        account = await db_session.scalar(select(Account))
        assert account.last_login is not None

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, client: AsyncClient):
        await register(client)
        client.cookies.clear()

        wrong_password = await _login(client, "ana@example.com", "wrong-password")
        unknown_email = await _login(client, "nobody@example.com")

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json()["error"] == unknown_email.json()["error"]
        assert wrong_password.json()["error"]["message"] == "Invalid credentials"
        assert COOKIE not in wrong_password.cookies

    @pytest.mark.asyncio
    async def test_inactive_account_cannot_login(self, client: AsyncClient, session_factory):
        await register(client)
        client.cookies.clear()
        async with session_factory() as session:
            await session.execute(update(Account).values(is_active=False))
            await session.commit()

        response = await _login(client, "ana@example.com")

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_login_missing_fields(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/login", json={"email": "ana@example.com"})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Email and password are required"


class TestSession:
    @pytest.mark.asyncio
    async def test_session_after_register(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/v1/auth/session")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["email"] == "ana@example.com"
        assert data["profile"]["displayName"] == "Ana"

    @pytest.mark.asyncio
    async def test_session_without_cookie(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/session")

        assert response.status_code == 200
        assert response.json()["data"] is None

    @pytest.mark.asyncio
    async def test_protected_endpoint_requires_session(self, client: AsyncClient):
        response = await client.get("/api/v1/clients")

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Not authenticated"

    @pytest.mark.asyncio
    async def test_garbage_cookie_is_rejected(self, client: AsyncClient):
        client.cookies.set(COOKIE, "not-a-token")
        response = await client.get("/api/v1/clients")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_deactivated_account_loses_session(self, auth_client: AsyncClient, session_factory):
        async with session_factory() as session:
            await session.execute(update(Account).values(is_active=False))
            await session.commit()

        response = await auth_client.get("/api/v1/clients")

        assert response.status_code == 401


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_clears_cookie_and_redirects(self, auth_client: AsyncClient):
        response = await auth_client.post("/api/v1/auth/logout")

        assert response.status_code == 303
        assert response.headers["location"] == settings.LOGIN_PATH
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{COOKIE}=")
        assert "Max-Age=0" in set_cookie

        session = await auth_client.get("/api/v1/auth/session")
        assert session.json()["data"] is None

    @pytest.mark.asyncio
    async def test_logout_without_session_still_redirects(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/logout")

        assert response.status_code == 303


class TestChangePassword:
    @pytest.mark.asyncio
    async def test_change_password(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/v1/auth/change-password",
            json={
                "currentPassword": DEFAULT_PASSWORD,
                "newPassword": "new-secret",
                "confirmPassword": "new-secret",
            },
        )
        assert response.status_code == 200

        auth_client.cookies.clear()
        assert (await _login(auth_client, "ana@example.com")).status_code == 401
        assert (await _login(auth_client, "ana@example.com", "new-secret")).status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/v1/auth/change-password",
            json={
                "currentPassword": "wrong-one",
                "newPassword": "new-secret",
                "confirmPassword": "new-secret",
            },
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Current password is incorrect"

    @pytest.mark.asyncio
    async def test_confirmation_mismatch(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/v1/auth/change-password",
            json={
                "currentPassword": DEFAULT_PASSWORD,
                "newPassword": "new-secret",
                "confirmPassword": "other-secret",
            },
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Passwords do not match"

    @pytest.mark.asyncio
    async def test_new_password_too_short(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/v1/auth/change-password",
            json={
                "currentPassword": DEFAULT_PASSWORD,
                "newPassword": "abc",
                "confirmPassword": "abc",
            },
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"].startswith("New password must be at least 6")


class TestRateLimit:
    @pytest.mark.asyncio
    async def test_repeated_logins_are_throttled(self, client: AsyncClient):
        for _ in range(10):
            response = await _login(client, "nobody@example.com")
            assert response.status_code == 401

        response = await _login(client, "nobody@example.com")

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "RATE_LIMIT"
        assert "retry-after" in response.headers
