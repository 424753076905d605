"""
Task API Endpoints
==================

Single-task operations. Tasks are created and listed under their
project (see ``projects.py``).
"""

import logging
import uuid

from fastapi import APIRouter

from deskflow.dependencies import CurrentSession, DBSession
from deskflow.schemas.common import BaseResponse, ErrorResponse
from deskflow.schemas.task import TaskUpdate
from deskflow.services.cache import CacheInvalidator
from deskflow.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Task not found"}}


@router.get("/statuses", response_model=BaseResponse)
async def list_statuses(session: CurrentSession, db: DBSession):
    """Work statuses shared by projects and tasks."""
    return BaseResponse(data=await TaskService(db).list_statuses())


@router.get("/{task_id}", response_model=BaseResponse, responses=NOT_FOUND)
async def get_task(task_id: uuid.UUID, session: CurrentSession, db: DBSession):
    task = await TaskService(db).get_task(task_id, session.profile_id)
    return BaseResponse(data=task.to_api_dict())


@router.patch("/{task_id}", response_model=BaseResponse, responses=NOT_FOUND)
async def update_task(
    task_id: uuid.UUID,
    payload: TaskUpdate,
    session: CurrentSession,
    db: DBSession,
):
    """Update only the fields sent."""
    task = await TaskService(db).update_task(task_id, session.profile_id, payload)
    await db.commit()
    await CacheInvalidator.on_project_change(str(session.profile_id))
    return BaseResponse(data=task.to_api_dict(), message="Task updated")


@router.delete("/{task_id}", response_model=BaseResponse, responses=NOT_FOUND)
async def delete_task(task_id: uuid.UUID, session: CurrentSession, db: DBSession):
    project_id = await TaskService(db).delete_task(task_id, session.profile_id)
    await db.commit()
    await CacheInvalidator.on_project_change(str(session.profile_id))
    return BaseResponse(data={"projectId": str(project_id)}, message="Task deleted")


@router.post("/{task_id}/complete", response_model=BaseResponse, responses=NOT_FOUND)
async def complete_task(task_id: uuid.UUID, session: CurrentSession, db: DBSession):
    task = await TaskService(db).complete_task(task_id, session.profile_id)
    await db.commit()
    await CacheInvalidator.on_project_change(str(session.profile_id))
    logger.info("Task %s completed", task_id)
    return BaseResponse(data=task.to_api_dict(), message="Task completed")


@router.post("/{task_id}/reopen", response_model=BaseResponse, responses=NOT_FOUND)
async def reopen_task(task_id: uuid.UUID, session: CurrentSession, db: DBSession):
    task = await TaskService(db).reopen_task(task_id, session.profile_id)
    await db.commit()
    await CacheInvalidator.on_project_change(str(session.profile_id))
    return BaseResponse(data=task.to_api_dict(), message="Task reopened")
