"""
Security Tests
==============

Password hashing and session token round trips.
"""

from datetime import datetime, timedelta, timezone
import uuid

from jose import jwt

from deskflow.config import settings
from deskflow.core.security import (
    SessionClaims,
    create_session_token,
    decode_token,
    hash_password,
    verify_password,
    verify_session_token,
)

ACCOUNT_ID = uuid.UUID("00000000-0000-0000-0000-0000000000a1")
PROFILE_ID = uuid.UUID("00000000-0000-0000-0000-0000000000b2")


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_cost_factor_is_twelve(self):
        hashed = hash_password("secret123")
        # $2b$12$...
        assert hashed.split("$")[2] == "12"

    def test_same_password_gets_new_salt(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("secret123", "not-a-bcrypt-hash") is False


class TestSessionTokens:
    def test_round_trip(self):
        token = create_session_token(ACCOUNT_ID, PROFILE_ID)

        assert verify_session_token(token) == SessionClaims(ACCOUNT_ID, PROFILE_ID)

    def test_payload_fields(self):
        issued = datetime(2026, 1, 1, tzinfo=timezone.utc)
        token = create_session_token(
            ACCOUNT_ID,
            PROFILE_ID,
            now=issued,
            expires_delta=timedelta(days=3650),
        )
        payload = decode_token(token)

        assert payload["accountId"] == str(ACCOUNT_ID)
        assert payload["profileId"] == str(PROFILE_ID)
        assert payload["type"] == "session"
        assert payload["exp"] - payload["iat"] == 3650 * 24 * 3600

    def test_default_lifetime_is_seven_days(self):
        payload = decode_token(create_session_token(ACCOUNT_ID, PROFILE_ID))
        assert payload["exp"] - payload["iat"] == settings.SESSION_EXPIRE_DAYS * 24 * 3600

    def test_expired_token_rejected(self):
        token = create_session_token(
            ACCOUNT_ID,
            PROFILE_ID,
            now=datetime.now(timezone.utc) - timedelta(days=8),
        )
        assert verify_session_token(token) is None

    def test_tampered_token_rejected(self):
        token = create_session_token(ACCOUNT_ID, PROFILE_ID)
        header, payload, signature = token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]

        assert verify_session_token(f"{header}.{payload}.{flipped}") is None

    def test_wrong_secret_rejected(self):
        token = jwt.encode(
            {
                "accountId": str(ACCOUNT_ID),
                "profileId": str(PROFILE_ID),
                "type": "session",
                "exp": datetime.now(timezone.utc) + timedelta(days=1),
            },
            "some-other-secret",
            algorithm="HS256",
        )
        assert verify_session_token(token) is None

    def test_wrong_type_rejected(self):
        token = jwt.encode(
            {
                "accountId": str(ACCOUNT_ID),
                "profileId": str(PROFILE_ID),
                "type": "refresh",
                "exp": datetime.now(timezone.utc) + timedelta(days=1),
            },
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        assert verify_session_token(token) is None

    def test_non_uuid_ids_rejected(self):
        token = jwt.encode(
            {
                "accountId": "42",
                "profileId": str(PROFILE_ID),
                "type": "session",
                "exp": datetime.now(timezone.utc) + timedelta(days=1),
            },
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        assert verify_session_token(token) is None

    def test_missing_token(self):
        assert verify_session_token(None) is None
        assert verify_session_token("") is None
        assert verify_session_token("garbage") is None
