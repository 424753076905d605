"""
Route Gate
==========

Redirects page navigation based on session state:

- unauthenticated request to a protected page -> login page with ``?from=``
- authenticated request to the login/registration page -> home page

API routes are not gated here; they answer 401 through the
``CurrentSession`` dependency instead.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from starlette.requests import HTTPConnection
from starlette.responses import RedirectResponse

from deskflow.config import settings
from deskflow.core.security import verify_session_token

logger = logging.getLogger(__name__)

EXEMPT_PREFIXES = ("/api/", "/static/")
EXEMPT_PATHS = frozenset({"/api", "/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico"})


def auth_paths() -> frozenset[str]:
    """Pages that only make sense without a session."""
    return frozenset({settings.LOGIN_PATH, settings.REGISTER_PATH})


def is_exempt(path: str) -> bool:
    """Paths the gate never touches (API, docs, health, static assets)."""
    if path in EXEMPT_PATHS or path.startswith(EXEMPT_PREFIXES):
        return True
    if path.startswith("/docs/"):
        return True
    # Files with an extension (e.g. /logo.png)
    last_segment = path.rsplit("/", 1)[-1]
    return "." in last_segment


def resolve_redirect(path: str, authenticated: bool) -> Optional[str]:
    """
    Decide where a page request should be redirected.

    Args:
        path: Request path
        authenticated: Whether the request carries a valid session token

    Returns:
        Redirect target, or None to let the request through
    """
    if is_exempt(path):
        return None

    if path in auth_paths():
        return settings.HOME_PATH if authenticated else None

    if not authenticated:
        return f"{settings.LOGIN_PATH}?{urlencode({'from': path})}"

    return None


class SessionGateMiddleware:
    """
    Raw ASGI middleware applying ``resolve_redirect`` to every HTTP request.

    Only verifies the token signature and expiry; no database lookup.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "/")
        if is_exempt(path):
            await self.app(scope, receive, send)
            return

        connection = HTTPConnection(scope)
        token = connection.cookies.get(settings.SESSION_COOKIE_NAME)
        authenticated = verify_session_token(token) is not None

        target = resolve_redirect(path, authenticated)
        if target is None:
            await self.app(scope, receive, send)
            return

        logger.debug("Route gate redirect %s -> %s", path, target)
        response = RedirectResponse(target, status_code=307)
        await response(scope, receive, send)
