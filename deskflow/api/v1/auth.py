"""
Authentication API Endpoints
============================

Handles registration, login, logout, password changes and session lookup.
The session token travels in an HTTP-only cookie.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse

from deskflow.config import settings
from deskflow.core.cookies import clear_session_cookie, issue_session_cookie
from deskflow.core.errors import ValidationError
from deskflow.core.rate_limit import create_rate_limit_dependency
from deskflow.dependencies import CurrentSession, CurrentSessionOptional, DBSession
from deskflow.schemas.auth import ChangePasswordRequest, LoginRequest, RegisterRequest
from deskflow.schemas.common import BaseResponse, ErrorResponse
from deskflow.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()

auth_rate_limit = Depends(create_rate_limit_dependency("auth"))


@router.post(
    "/register",
    response_model=BaseResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[auth_rate_limit],
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields or weak password"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        429: {"model": ErrorResponse, "description": "Too many attempts"},
    },
)
async def register(
    payload: RegisterRequest,
    request: Request,
    response: Response,
    db: DBSession,
):
    """
    Register a new account and sign it in.

    Creates the profile and account, then sets the session cookie.
    """
    result = await AuthService(db).register(
        email=payload.email,
        password=payload.password,
        display_name=payload.display_name,
    )
    issue_session_cookie(response, result.token, request)

    return BaseResponse(
        data={"account": result.account.to_summary_dict()},
        message="Account created successfully",
    )


@router.post(
    "/login",
    response_model=BaseResponse,
    dependencies=[auth_rate_limit],
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        429: {"model": ErrorResponse, "description": "Too many attempts"},
    },
)
async def login(
    credentials: LoginRequest,
    request: Request,
    response: Response,
    db: DBSession,
):
    """
    Authenticate and set the session cookie.
    """
    result = await AuthService(db).login(
        email=credentials.email,
        password=credentials.password,
    )
    issue_session_cookie(response, result.token, request)

    logger.info("Account %s logged in", result.account.account_id)
    return BaseResponse(
        data={"account": result.account.to_summary_dict()},
        message="Logged in",
    )


@router.post("/logout", status_code=status.HTTP_303_SEE_OTHER)
async def logout(request: Request):
    """
    Clear the session cookie and redirect to the login page.

    Always redirects, whether or not a session existed. Tokens are
    stateless, so an already issued token stays valid until it expires.
    """
    response = RedirectResponse(
        url=settings.LOGIN_PATH,
        status_code=status.HTTP_303_SEE_OTHER,
    )
    clear_session_cookie(response, request)
    return response


@router.post(
    "/change-password",
    response_model=BaseResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid new password"},
        401: {"model": ErrorResponse, "description": "Not signed in or wrong current password"},
    },
)
async def change_password(
    payload: ChangePasswordRequest,
    session: CurrentSession,
    db: DBSession,
):
    """
    Change the signed-in account's password.

    The new password must be confirmed.
    """
    if payload.new_password != payload.confirm_password:
        raise ValidationError(
            message="Passwords do not match",
            field="confirm_password",
        )

    await AuthService(db).change_password(
        account_id=session.account_id,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    return BaseResponse(message="Password updated")


@router.get("/session", response_model=BaseResponse)
async def get_session(session: CurrentSessionOptional):
    """
    Current session, or ``data: null`` when not signed in.
    """
    return BaseResponse(data=session.to_api_dict() if session else None)
