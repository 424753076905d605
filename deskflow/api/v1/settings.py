"""
Settings API Endpoints
======================

Profile settings and the catalogs offered on the settings screen.
"""

import logging

from fastapi import APIRouter

from deskflow.dependencies import CurrentSession, DBSession
from deskflow.schemas.common import BaseResponse, ErrorResponse
from deskflow.schemas.settings import ProfileUpdate
from deskflow.services.cache import CacheInvalidator
from deskflow.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile", response_model=BaseResponse)
async def get_profile(session: CurrentSession, db: DBSession):
    """Profile with profession and preferred theme."""
    return BaseResponse(data=await SettingsService(db).get_profile(session.profile_id))


@router.patch(
    "/profile",
    response_model=BaseResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Blank name"},
        404: {"model": ErrorResponse, "description": "Profession or theme not found"},
    },
)
async def update_profile(payload: ProfileUpdate, session: CurrentSession, db: DBSession):
    """Update only the fields sent."""
    data = await SettingsService(db).update_profile(session.profile_id, payload)
    await db.commit()
    await CacheInvalidator.on_profile_update(str(session.profile_id))
    return BaseResponse(data=data, message="Profile updated")


@router.get("/professions", response_model=BaseResponse)
async def list_professions(session: CurrentSession, db: DBSession):
    return BaseResponse(data=await SettingsService(db).list_professions())


@router.get("/professions/{profession_id}/skills", response_model=BaseResponse)
async def list_profession_skills(profession_id: int, session: CurrentSession, db: DBSession):
    return BaseResponse(data=await SettingsService(db).list_profession_skills(profession_id))


@router.get("/skills", response_model=BaseResponse)
async def list_skills(session: CurrentSession, db: DBSession):
    return BaseResponse(data=await SettingsService(db).list_skills())


@router.get("/themes", response_model=BaseResponse)
async def list_themes(session: CurrentSession, db: DBSession):
    """Visual themes; priced ones are flagged premium."""
    return BaseResponse(data=await SettingsService(db).list_themes())


@router.get("/stats", response_model=BaseResponse)
async def usage_stats(session: CurrentSession, db: DBSession):
    return BaseResponse(data=await SettingsService(db).get_usage_stats(session.profile_id))
