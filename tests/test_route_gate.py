"""
Route Gate Tests
================

Page redirects based on session state, both as a pure decision and
through the middleware.
"""

import pytest
from httpx import AsyncClient

from deskflow.config import settings
from deskflow.core.route_gate import is_exempt, resolve_redirect


class TestResolveRedirect:
    @pytest.mark.parametrize("path", ["/", "/projects", "/clients/123"])
    def test_protected_page_without_session_goes_to_login(self, path):
        target = resolve_redirect(path, authenticated=False)
        assert target.startswith(f"{settings.LOGIN_PATH}?from=")

    def test_from_parameter_is_encoded(self):
        assert resolve_redirect("/projects", authenticated=False) == "/login?from=%2Fprojects"

    @pytest.mark.parametrize("path", ["/login", "/register"])
    def test_auth_pages_with_session_go_home(self, path):
        assert resolve_redirect(path, authenticated=True) == settings.HOME_PATH

    @pytest.mark.parametrize("path", ["/login", "/register"])
    def test_auth_pages_without_session_pass(self, path):
        assert resolve_redirect(path, authenticated=False) is None

    def test_protected_page_with_session_passes(self):
        assert resolve_redirect("/projects", authenticated=True) is None

    @pytest.mark.parametrize(
        "path",
        ["/api/v1/clients", "/health", "/docs", "/openapi.json", "/static/app.css", "/logo.png"],
    )
    def test_exempt_paths(self, path):
        assert is_exempt(path)
        assert resolve_redirect(path, authenticated=False) is None


class TestSessionGateMiddleware:
    @pytest.mark.asyncio
    async def test_unauthenticated_page_redirects(self, client: AsyncClient):
        response = await client.get("/projects")

        assert response.status_code == 307
        assert response.headers["location"] == "/login?from=%2Fprojects"

    @pytest.mark.asyncio
    async def test_login_page_without_session(self, client: AsyncClient):
        response = await client.get("/login", params={"from": "/projects"})

        assert response.status_code == 200
        assert response.json()["page"] == "login"
        assert response.json()["from"] == "/projects"

    @pytest.mark.asyncio
    async def test_signed_in_user_leaves_login_page(self, auth_client: AsyncClient):
        response = await auth_client.get("/login")

        assert response.status_code == 307
        assert response.headers["location"] == "/"

    @pytest.mark.asyncio
    async def test_signed_in_user_reaches_home(self, auth_client: AsyncClient):
        response = await auth_client.get("/")

        assert response.status_code == 200
        assert response.json()["account"]["email"] == "ana@example.com"

    @pytest.mark.asyncio
    async def test_api_routes_are_not_redirected(self, client: AsyncClient):
        response = await client.get("/api/v1/projects")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_cookie_counts_as_signed_out(self, client: AsyncClient):
        client.cookies.set(settings.SESSION_COOKIE_NAME, "tampered")
        response = await client.get("/register")

        assert response.status_code == 200
