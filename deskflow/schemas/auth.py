"""
Authentication Schemas
======================

Pydantic schemas for authentication endpoints.

Fields are deliberately loose (plain strings, no length rules) so the
service layer reports missing or short values with its own messages.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Request schema for account registration."""

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, max_length=128)
    display_name: Optional[str] = Field(None, alias="displayName", max_length=100)


class LoginRequest(BaseModel):
    """Request schema for login."""

    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, max_length=128)


class ChangePasswordRequest(BaseModel):
    """Request schema for changing the current account's password."""

    model_config = ConfigDict(populate_by_name=True)

    current_password: Optional[str] = Field(None, alias="currentPassword", max_length=128)
    new_password: Optional[str] = Field(None, alias="newPassword", max_length=128)
    confirm_password: Optional[str] = Field(None, alias="confirmPassword", max_length=128)
