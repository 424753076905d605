"""
Settings Schemas
================
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    """Request schema for profile settings. Only sent fields change."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: Optional[str] = Field(None, alias="displayName", max_length=100)
    avatar: Optional[str] = Field(None, max_length=500)
    birth_date: Optional[date] = Field(None, alias="birthDate")
    locale: Optional[str] = Field(None, max_length=10)
    dark_mode: Optional[bool] = Field(None, alias="darkMode")
    profession_id: Optional[int] = Field(None, alias="professionId")
    preferred_theme_id: Optional[int] = Field(None, alias="preferredThemeId")
