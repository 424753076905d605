"""
Security Module
===============

Authentication and security utilities including:
- Password hashing with bcrypt
- Session token generation and validation (signed JWT)
"""

from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple, Optional
import uuid

from jose import JWTError, jwt
from passlib.context import CryptContext

from deskflow.config import settings

# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

SESSION_TOKEN_TYPE = "session"


class SessionClaims(NamedTuple):
    """Identity carried by a verified session token."""

    account_id: uuid.UUID
    profile_id: uuid.UUID


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string (salt and cost embedded)
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Stored hash to compare against

    Returns:
        True if password matches, False otherwise
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed or unrecognised hash
        return False


def dummy_verify() -> None:
    """Burn one hash verification so unknown accounts take as long as known ones."""
    pwd_context.dummy_verify()


def create_session_token(
    account_id: uuid.UUID,
    profile_id: uuid.UUID,
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Create a signed session token.

    Args:
        account_id: Account the session belongs to
        profile_id: Profile linked to the account
        expires_delta: Custom lifetime (defaults to SESSION_EXPIRE_DAYS)
        now: Issue time (defaults to the current UTC time)

    Returns:
        Encoded JWT string
    """
    issued_at = now or datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.SESSION_EXPIRE_DAYS)

    to_encode = {
        "accountId": str(account_id),
        "profileId": str(profile_id),
        "iat": issued_at,
        "exp": issued_at + expires_delta,
        "type": SESSION_TOKEN_TYPE,
    }

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded payload if signature and expiry are valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
        return payload
    except JWTError:
        return None


def verify_session_token(token: Optional[str]) -> Optional[SessionClaims]:
    """
    Verify a session token and extract its identity.

    Returns None for a missing, malformed, tampered or expired token, or
    one whose ids are not UUIDs.
    """
    if not token:
        return None

    payload = decode_token(token)
    if payload is None or payload.get("type") != SESSION_TOKEN_TYPE:
        return None

    try:
        return SessionClaims(
            account_id=uuid.UUID(str(payload["accountId"])),
            profile_id=uuid.UUID(str(payload["profileId"])),
        )
    except (KeyError, ValueError):
        return None
