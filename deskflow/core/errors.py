"""
Error Handling
==============

Standardized error codes and exception handlers.

Every failure leaves the API in the same envelope:
``{"success": false, "error": {"code": ..., "message": ...}}``.
"""

import logging
from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """Standardized error codes."""

    # Authentication (AUTH_001 - AUTH_010)
    AUTH_INVALID_CREDENTIALS = "AUTH_001"
    AUTH_NOT_AUTHENTICATED = "AUTH_002"
    AUTH_WRONG_PASSWORD = "AUTH_003"
    AUTH_EMAIL_EXISTS = "AUTH_004"

    # Clients
    CLIENT_NOT_FOUND = "CLIENT_001"

    # Projects
    PROJECT_NOT_FOUND = "PROJECT_001"

    # Tasks
    TASK_NOT_FOUND = "TASK_001"

    # Finances
    EXPENSE_NOT_FOUND = "FINANCE_001"
    INCOME_NOT_FOUND = "FINANCE_002"
    CURRENCY_NOT_FOUND = "FINANCE_003"

    # Settings
    PROFILE_NOT_FOUND = "PROFILE_001"
    PROFESSION_NOT_FOUND = "PROFILE_002"
    THEME_NOT_FOUND = "PROFILE_003"

    # Infrastructure
    DB_UNAVAILABLE = "DB_UNAVAILABLE"
    RATE_LIMIT = "RATE_LIMIT"

    # General
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"


# =============================================================================
# Custom Exceptions
# =============================================================================

class AppException(HTTPException):
    """Base application exception with structured error response."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        field: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
        **extra,
    ):
        self.code = code
        self.message = message
        self.field = field
        self.extra = extra

        detail = {
            "code": code,
            "message": message,
        }

        if field:
            detail["field"] = field

        detail.update(extra)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


class AuthenticationError(AppException):
    """Authentication-related errors."""

    def __init__(
        self,
        code: str = ErrorCodes.AUTH_INVALID_CREDENTIALS,
        message: str = "Authentication failed",
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            code=code,
            message=message,
            **extra,
        )


class NotFoundError(AppException):
    """Resource not found errors."""

    def __init__(
        self,
        code: str = ErrorCodes.NOT_FOUND,
        message: str = "Resource not found",
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code=code,
            message=message,
            **extra,
        )


class ConflictError(AppException):
    """Resource conflict errors."""

    def __init__(
        self,
        code: str,
        message: str,
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            code=code,
            message=message,
            **extra,
        )


class ValidationError(AppException):
    """Validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ErrorCodes.VALIDATION_ERROR,
            message=message,
            field=field,
            **extra,
        )


class RateLimitError(AppException):
    """Too many attempts from one client."""

    def __init__(self, retry_after: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            code=ErrorCodes.RATE_LIMIT,
            message=f"Too many attempts. Try again in {retry_after} seconds.",
            headers={"Retry-After": str(retry_after)},
        )


class DatabaseUnavailableError(AppException):
    """The database could not be reached or the pool is exhausted."""

    def __init__(
        self,
        message: str = "Database temporarily unavailable",
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            code=ErrorCodes.DB_UNAVAILABLE,
            message=message,
            **extra,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

def _error_response(status_code: int, error: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
        },
    )


async def app_exception_handler(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    """Handler for AppException."""
    response = _error_response(exc.status_code, exc.detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def http_exception_handler(
    request: Request,
    exc: HTTPException,
) -> JSONResponse:
    """Handler for standard HTTPException."""
    # Check if detail is already structured
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        error = exc.detail
    else:
        error = {
            "code": "HTTP_ERROR",
            "message": str(exc.detail),
        }

    return _error_response(exc.status_code, error)


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handler for request body/query validation errors."""
    errors = exc.errors() if hasattr(exc, "errors") else []
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", []))
        message = first_error.get("msg", "Validation error")
    else:
        field = None
        message = str(exc) or "Validation error"

    error = {
        "code": ErrorCodes.VALIDATION_ERROR,
        "message": message,
    }
    if field:
        error["field"] = field

    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, error)


async def database_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handler for pool exhaustion and lost database connections."""
    logger.error(
        "Database unavailable on %s %s: %s",
        request.method,
        request.url.path,
        exc,
    )
    unavailable = DatabaseUnavailableError()
    return _error_response(unavailable.status_code, unavailable.detail)


async def global_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception(
        "Unhandled error on %s %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
    )

    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {
            "code": ErrorCodes.INTERNAL_ERROR,
            "message": "An unexpected error occurred",
        },
    )


def setup_exception_handlers(app):
    """
    Register exception handlers with FastAPI app.

    Usage:
        from deskflow.core.errors import setup_exception_handlers
        setup_exception_handlers(app)
    """
    from pydantic import ValidationError as PydanticValidationError
    from fastapi.exceptions import RequestValidationError

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(PoolTimeoutError, database_exception_handler)
    app.add_exception_handler(OperationalError, database_exception_handler)
    app.add_exception_handler(InterfaceError, database_exception_handler)
    app.add_exception_handler(ConnectionRefusedError, database_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
