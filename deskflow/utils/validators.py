"""
Validators
==========

Common validation utilities. Each raises ``ValidationError`` with a
human-readable message and the offending field.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from deskflow.core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
MIN_PASSWORD_LENGTH = 6


def normalize_email(email: Optional[str]) -> str:
    """Trim and lower-case an email address for storage and lookup."""
    return (email or "").strip().lower()


def validate_email(email: str) -> str:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        Normalized email (trimmed, lowercase)

    Raises:
        ValidationError: If email is invalid
    """
    email = normalize_email(email)

    if not EMAIL_PATTERN.match(email):
        raise ValidationError(
            message="Invalid email format",
            field="email",
        )

    return email


def validate_password(password: str, field: str = "password") -> str:
    """
    Validate password length.

    Raises:
        ValidationError: If the password is shorter than 6 characters
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        label = "New password" if field == "new_password" else "Password"
        raise ValidationError(
            message=f"{label} must be at least {MIN_PASSWORD_LENGTH} characters long",
            field=field,
        )

    return password


def require_text(value: Optional[str], field: str, label: str) -> str:
    """
    Trim a required text value.

    Raises:
        ValidationError: If the value is missing or blank
    """
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(
            message=f"{label} is required",
            field=field,
        )
    return cleaned


def validate_positive_amount(amount: Any, field: str = "amount") -> Decimal:
    """
    Parse a money amount that must be strictly greater than zero.

    Raises:
        ValidationError: If the amount is missing, not a number, or <= 0
    """
    try:
        value = Decimal(str(amount)) if amount is not None else None
    except (InvalidOperation, ValueError):
        raise ValidationError(message="Amount must be a number", field=field) from None

    if value is None or not value.is_finite() or value <= 0:
        raise ValidationError(
            message="Amount must be greater than 0",
            field=field,
        )

    return value


def validate_importance(importance: int) -> int:
    """
    Task importance is a 1-5 scale.

    Raises:
        ValidationError: If outside the scale
    """
    if importance < 1 or importance > 5:
        raise ValidationError(
            message="Importance must be between 1 and 5",
            field="importance",
        )
    return importance
