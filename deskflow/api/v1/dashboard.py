"""
Dashboard API Endpoints
=======================
"""

from fastapi import APIRouter

from deskflow.dependencies import CurrentSession, DBSession
from deskflow.schemas.common import BaseResponse
from deskflow.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("", response_model=BaseResponse)
async def dashboard_overview(session: CurrentSession, db: DBSession):
    """
    Counters, recent projects, upcoming tasks and portfolio finances.

    Cached for five minutes per profile; any mutation drops the cache.
    """
    return BaseResponse(data=await DashboardService(db).get_overview(session.profile_id))
