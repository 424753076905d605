"""
Session Cookie
==============

Issues and clears the HTTP-only cookie that carries the session token.
"""

from typing import Optional

from fastapi import Request, Response

from deskflow.config import settings


def _is_secure(request: Optional[Request]) -> bool:
    if settings.is_production:
        return True
    return request is not None and request.url.scheme == "https"


def issue_session_cookie(
    response: Response,
    token: str,
    request: Optional[Request] = None,
) -> None:
    """
    Attach the session cookie to a response.

    HttpOnly, SameSite=Lax, Path=/, Max-Age equal to the token lifetime,
    Secure in production or when the request came in over https.
    """
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_max_age_seconds,
        path="/",
        httponly=True,
        secure=_is_secure(request),
        samesite="lax",
    )


def clear_session_cookie(
    response: Response,
    request: Optional[Request] = None,
) -> None:
    """Expire the session cookie on the client."""
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=_is_secure(request),
        samesite="lax",
    )


def read_session_token(request: Request) -> Optional[str]:
    """Return the raw session token from the request cookies, if any."""
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None
