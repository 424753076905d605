"""
Authentication Service
======================

Business logic for registration, login, password changes and session
resolution.
"""

import logging
from dataclasses import dataclass
from typing import Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from deskflow.core.errors import (
    AuthenticationError,
    ConflictError,
    ErrorCodes,
    NotFoundError,
    ValidationError,
)
from deskflow.core.security import (
    create_session_token,
    dummy_verify,
    hash_password,
    verify_password,
    verify_session_token,
)
from deskflow.models.account import Account, Profile
from deskflow.utils.helpers import utc_now
from deskflow.utils.validators import normalize_email, validate_email, validate_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass
class AuthResult:
    """Account plus the freshly signed session token."""

    account: Account
    token: str


@dataclass
class Session:
    """Identity resolved from a valid session token."""

    account: Account
    profile: Profile

    @property
    def account_id(self) -> uuid.UUID:
        return self.account.account_id

    @property
    def profile_id(self) -> uuid.UUID:
        return self.profile.profile_id

    def to_api_dict(self) -> dict:
        return {
            **self.account.to_summary_dict(),
            "profile": {
                "id": str(self.profile.profile_id),
                "displayName": self.profile.display_name,
                "avatar": self.profile.avatar,
                "darkMode": self.profile.dark_mode,
            },
        }


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_account_by_email(self, email: str) -> Optional[Account]:
        """Get account by email (case-insensitive)."""
        stmt = select(Account).where(Account.email == normalize_email(email))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_account_by_id(self, account_id: uuid.UUID) -> Optional[Account]:
        """Get account by ID with its profile loaded."""
        stmt = (
            select(Account)
            .options(selectinload(Account.profile))
            .where(Account.account_id == account_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def register(
        self,
        email: Optional[str],
        password: Optional[str],
        display_name: Optional[str],
    ) -> AuthResult:
        """
        Create a profile and its account, then issue a session token.

        Raises:
            ValidationError: Missing fields, bad email, short password
            ConflictError: Email already registered
        """
        display_name = (display_name or "").strip()
        if not (email or "").strip() or not password or not display_name:
            raise ValidationError(message="All fields are required")

        email = validate_email(email)
        validate_password(password)

        if await self.get_account_by_email(email) is not None:
            raise ConflictError(
                code=ErrorCodes.AUTH_EMAIL_EXISTS,
                message="Email is already registered",
                field="email",
            )

        profile = Profile(display_name=display_name, dark_mode=False)
        self.db.add(profile)
        await self.db.flush()

        account = Account(
            email=email,
            display_name=display_name,
            password_hash=hash_password(password),
            is_active=True,
            profile_id=profile.profile_id,
        )
        self.db.add(account)
        await self.db.flush()

        logger.info("Registered account %s", account.account_id)

        token = create_session_token(account.account_id, profile.profile_id)
        return AuthResult(account=account, token=token)

    async def login(
        self,
        email: Optional[str],
        password: Optional[str],
    ) -> AuthResult:
        """
        Verify credentials, stamp last_login and issue a session token.

        Unknown email, inactive account and wrong password are
        indistinguishable to the caller.

        Raises:
            ValidationError: Missing email or password
            AuthenticationError: Any credential failure
        """
        if not (email or "").strip() or not password:
            raise ValidationError(message="Email and password are required")

        account = await self.get_account_by_email(email)

        if account is None:
            dummy_verify()
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        password_ok = verify_password(password, account.password_hash)
        if not password_ok or not account.is_active:
            logger.info("Failed login for account %s", account.account_id)
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        account.last_login = utc_now()
        await self.db.flush()

        token = create_session_token(account.account_id, account.profile_id)
        return AuthResult(account=account, token=token)

    async def change_password(
        self,
        account_id: uuid.UUID,
        current_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        """
        Replace an account's password after verifying the current one.

        Raises:
            ValidationError: Missing passwords or new password too short
            NotFoundError: Account no longer exists
            AuthenticationError: Current password does not match
        """
        if not current_password or not new_password:
            raise ValidationError(message="Current and new password are required")

        validate_password(new_password, field="new_password")

        account = await self.db.get(Account, account_id)
        if account is None:
            raise NotFoundError(message="Account not found")

        if not verify_password(current_password, account.password_hash):
            raise AuthenticationError(
                code=ErrorCodes.AUTH_WRONG_PASSWORD,
                message="Current password is incorrect",
                field="current_password",
            )

        account.password_hash = hash_password(new_password)
        await self.db.flush()
        logger.info("Password changed for account %s", account_id)

    async def get_session(self, token: Optional[str]) -> Optional[Session]:
        """
        Resolve a session token to its account and profile.

        Returns None for any invalid token, unknown account or inactive
        account.
        """
        claims = verify_session_token(token)
        if claims is None:
            return None

        account = await self.get_account_by_id(claims.account_id)
        if account is None or not account.is_active:
            return None

        if account.profile_id != claims.profile_id or account.profile is None:
            return None

        return Session(account=account, profile=account.profile)
