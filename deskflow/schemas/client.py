"""
Client Schemas
==============

Pydantic schemas for client endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class _ClientFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    client_type_id: Optional[int] = Field(None, alias="clientTypeId")

    @field_validator("email", "phone", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Blank optional text arrives as empty string from forms."""
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class ClientCreate(_ClientFields):
    """Request schema for creating a client."""

    name: Optional[str] = Field(None, max_length=120)


class ClientUpdate(_ClientFields):
    """Request schema for updating a client. Only sent fields change."""

    name: Optional[str] = Field(None, max_length=120)
    is_active: Optional[bool] = Field(None, alias="isActive")
