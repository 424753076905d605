"""
Settings Service
================

Profile settings plus the catalogs the settings screen offers
(professions, skills, visual themes).
"""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from deskflow.core.errors import ErrorCodes, NotFoundError
from deskflow.models.account import Profile
from deskflow.models.catalog import Profession, Skill, VisualTheme
from deskflow.models.client import Client
from deskflow.models.project import Project, Task
from deskflow.schemas.settings import ProfileUpdate
from deskflow.services.cache import CacheKeys, CacheManager
from deskflow.utils.helpers import clean_optional
from deskflow.utils.validators import require_text

logger = logging.getLogger(__name__)


class SettingsService:
    """Service for profile settings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, profile_id: uuid.UUID) -> dict:
        """Profile with profession and preferred theme (cached)."""
        cache_key = CacheKeys.profile(str(profile_id))
        cached = await CacheManager.get(cache_key)
        if cached is not None:
            return cached

        profile = await self._load_profile(profile_id)
        data = profile.to_api_dict()
        await CacheManager.set(cache_key, data, ttl=CacheManager.TTL_SHORT)
        return data

    async def update_profile(
        self,
        profile_id: uuid.UUID,
        data: ProfileUpdate,
    ) -> dict:
        """
        Update only the fields that were sent.

        Raises:
            ValidationError: Blank display name
            NotFoundError: Unknown profession or theme
        """
        profile = await self._load_profile(profile_id)
        changes = data.model_dump(exclude_unset=True)

        if "display_name" in changes:
            changes["display_name"] = require_text(
                changes["display_name"], "display_name", "Name"
            )
        if "avatar" in changes:
            changes["avatar"] = clean_optional(changes["avatar"])
        if "locale" in changes:
            changes["locale"] = clean_optional(changes["locale"])
        if "dark_mode" in changes and changes["dark_mode"] is None:
            del changes["dark_mode"]
        if changes.get("profession_id") is not None:
            if await self.db.get(Profession, changes["profession_id"]) is None:
                raise NotFoundError(
                    code=ErrorCodes.PROFESSION_NOT_FOUND,
                    message="Profession not found",
                )
        if changes.get("preferred_theme_id") is not None:
            if await self.db.get(VisualTheme, changes["preferred_theme_id"]) is None:
                raise NotFoundError(
                    code=ErrorCodes.THEME_NOT_FOUND,
                    message="Theme not found",
                )

        for field, value in changes.items():
            setattr(profile, field, value)

        if "display_name" in changes and profile.account is not None:
            profile.account.display_name = changes["display_name"]

        await self.db.flush()
        logger.info("Updated profile %s", profile_id)

        profile = await self._load_profile(profile_id)
        return profile.to_api_dict()

    async def list_professions(self) -> list[dict]:
        result = await self.db.execute(select(Profession).order_by(Profession.name))
        return [profession.to_api_dict() for profession in result.scalars().all()]

    async def list_skills(self) -> list[dict]:
        result = await self.db.execute(select(Skill).order_by(Skill.name))
        return [skill.to_api_dict() for skill in result.scalars().all()]

    async def list_profession_skills(self, profession_id: int) -> list[dict]:
        """Skills grouped under one profession."""
        profession = await self.db.get(Profession, profession_id)
        if profession is None:
            raise NotFoundError(
                code=ErrorCodes.PROFESSION_NOT_FOUND,
                message="Profession not found",
            )
        return [skill.to_api_dict() for skill in profession.skills]

    async def list_themes(self) -> list[dict]:
        """Visual themes, free ones first."""
        result = await self.db.execute(
            select(VisualTheme).order_by(VisualTheme.price, VisualTheme.name)
        )
        return [theme.to_api_dict() for theme in result.scalars().all()]

    async def get_usage_stats(self, profile_id: uuid.UUID) -> dict:
        """How many clients, projects and tasks the profile has."""
        clients = await self.db.scalar(
            select(func.count(Client.client_id)).where(Client.profile_id == profile_id)
        )
        projects = await self.db.scalar(
            select(func.count(Project.project_id)).where(Project.profile_id == profile_id)
        )
        tasks = await self.db.scalar(
            select(func.count(Task.task_id))
            .join(Project, Project.project_id == Task.project_id)
            .where(Project.profile_id == profile_id)
        )
        return {
            "clients": clients or 0,
            "projects": projects or 0,
            "tasks": tasks or 0,
        }

    async def _load_profile(self, profile_id: uuid.UUID) -> Profile:
        result = await self.db.execute(
            select(Profile)
            .options(
                selectinload(Profile.profession),
                selectinload(Profile.preferred_theme),
                selectinload(Profile.account),
            )
            .where(Profile.profile_id == profile_id)
            .execution_options(populate_existing=True)
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            raise NotFoundError(
                code=ErrorCodes.PROFILE_NOT_FOUND,
                message="Profile not found",
            )
        return profile
