"""
Project API Endpoints
=====================

Projects of the signed-in profile, their tasks, and derived progress,
timing and net profit.
"""

import logging
from typing import Optional
import uuid

from fastapi import APIRouter, Query, status

from deskflow.core.metrics import TimingStatus
from deskflow.dependencies import CurrentSession, DBSession
from deskflow.schemas.common import BaseResponse, ErrorResponse
from deskflow.schemas.project import ProjectCreate, ProjectUpdate
from deskflow.schemas.task import TaskCreate
from deskflow.services.cache import CacheInvalidator
from deskflow.services.project_service import ProjectService
from deskflow.services.task_service import TaskService
from deskflow.utils.helpers import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Project not found"}}


# =============================================================================
# Projects
# =============================================================================

@router.get("", response_model=BaseResponse)
async def list_projects(
    session: CurrentSession,
    db: DBSession,
    archived: Optional[bool] = Query(None),
    timing: Optional[TimingStatus] = Query(None),
):
    """
    List projects, pinned first, with progress and timing.

    ``timing`` keeps only late, early or on-time projects.
    """
    projects = await ProjectService(db).list_projects(
        session.profile_id,
        now=utc_now(),
        archived=archived,
        timing=timing,
    )
    return BaseResponse(data=projects)


@router.get("/options", response_model=BaseResponse)
async def project_form_options(session: CurrentSession, db: DBSession):
    """Active clients and project types for the project form."""
    service = ProjectService(db)
    return BaseResponse(
        data={
            "clients": await service.list_active_clients(session.profile_id),
            "projectTypes": await service.list_project_types(),
        }
    )


@router.get("/{project_id}", response_model=BaseResponse, responses=NOT_FOUND)
async def get_project(project_id: uuid.UUID, session: CurrentSession, db: DBSession):
    """Project with tasks, expenses, progress, timing, net profit and hours."""
    data = await ProjectService(db).get_project_detail(
        project_id,
        session.profile_id,
        now=utc_now(),
    )
    return BaseResponse(data=data)


@router.post(
    "",
    response_model=BaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Missing name or client"},
        404: {"model": ErrorResponse, "description": "Client not found"},
    },
)
async def create_project(payload: ProjectCreate, session: CurrentSession, db: DBSession):
    project = await ProjectService(db).create_project(session.profile_id, payload)
    await db.commit()
    await CacheInvalidator.on_project_change(str(session.profile_id))
    return BaseResponse(data=project.to_api_dict(), message="Project created")


@router.patch("/{project_id}", response_model=BaseResponse, responses=NOT_FOUND)
async def update_project(
    project_id: uuid.UUID,
    payload: ProjectUpdate,
    session: CurrentSession,
    db: DBSession,
):
    """Update only the fields sent."""
    project = await ProjectService(db).update_project(project_id, session.profile_id, payload)
    await db.commit()
    await CacheInvalidator.on_project_change(str(session.profile_id))
    return BaseResponse(data=project.to_api_dict(), message="Project updated")


@router.delete("/{project_id}", response_model=BaseResponse, responses=NOT_FOUND)
async def delete_project(project_id: uuid.UUID, session: CurrentSession, db: DBSession):
    """Delete the project and its tasks; linked finance entries are kept, unlinked."""
    await ProjectService(db).delete_project(project_id, session.profile_id)
    await db.commit()
    await CacheInvalidator.on_project_change(str(session.profile_id))
    return BaseResponse(message="Project deleted")


@router.post("/{project_id}/archive", response_model=BaseResponse, responses=NOT_FOUND)
async def toggle_archive(project_id: uuid.UUID, session: CurrentSession, db: DBSession):
    project = await ProjectService(db).toggle_archived(project_id, session.profile_id)
    await db.commit()
    await CacheInvalidator.on_project_change(str(session.profile_id))
    return BaseResponse(
        data=project.to_api_dict(),
        message="Project archived" if project.is_archived else "Project restored",
    )


@router.post("/{project_id}/pin", response_model=BaseResponse, responses=NOT_FOUND)
async def toggle_pin(project_id: uuid.UUID, session: CurrentSession, db: DBSession):
    project = await ProjectService(db).toggle_pinned(project_id, session.profile_id)
    await db.commit()
    await CacheInvalidator.on_project_change(str(session.profile_id))
    return BaseResponse(
        data=project.to_api_dict(),
        message="Project pinned" if project.is_pinned else "Project unpinned",
    )


# =============================================================================
# Tasks of a project
# =============================================================================

@router.get("/{project_id}/tasks", response_model=BaseResponse, responses=NOT_FOUND)
async def list_project_tasks(project_id: uuid.UUID, session: CurrentSession, db: DBSession):
    """Tasks ordered by status, importance, then due date."""
    tasks = await TaskService(db).list_tasks(project_id, session.profile_id)
    return BaseResponse(data=[task.to_api_dict() for task in tasks])


@router.post(
    "/{project_id}/tasks",
    response_model=BaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses=NOT_FOUND,
)
async def create_project_task(
    project_id: uuid.UUID,
    payload: TaskCreate,
    session: CurrentSession,
    db: DBSession,
):
    task = await TaskService(db).create_task(project_id, session.profile_id, payload)
    await db.commit()
    await CacheInvalidator.on_project_change(str(session.profile_id))
    return BaseResponse(data=task.to_api_dict(), message="Task created")
