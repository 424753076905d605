"""
Common Dependencies
===================

Shared dependencies used across the application.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from deskflow.core.cookies import read_session_token
from deskflow.core.errors import AuthenticationError, ErrorCodes
from deskflow.db.session import get_db
from deskflow.services.auth_service import AuthService, Session

logger = logging.getLogger(__name__)

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_session_optional(
    request: Request,
    db: DBSession,
) -> Optional[Session]:
    """
    Resolve the session cookie, or None when there is no valid session.

    Use this for endpoints that work with or without authentication.
    """
    session = await AuthService(db).get_session(read_session_token(request))
    if session is not None:
        # Picked up by the New Relic middleware
        request.state.account_id = session.account_id
    return session


async def get_current_session(
    session: Annotated[Optional[Session], Depends(get_current_session_optional)],
) -> Session:
    """
    Get the current authenticated session.

    Raises 401 if the cookie is missing, invalid, expired, or points to an
    unknown or inactive account.
    """
    if session is None:
        raise AuthenticationError(
            code=ErrorCodes.AUTH_NOT_AUTHENTICATED,
            message="Not authenticated",
        )
    return session


# Type alias for authenticated session dependency
CurrentSession = Annotated[Session, Depends(get_current_session)]
CurrentSessionOptional = Annotated[Optional[Session], Depends(get_current_session_optional)]
