"""
Task Service
============

Business logic for project tasks. Tasks have no owner column of their
own; every query joins through the project to check the profile.
"""

import logging
from typing import Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from deskflow.core.errors import ErrorCodes, NotFoundError, ValidationError
from deskflow.models.catalog import Status, WorkStatus
from deskflow.models.project import Project, Task
from deskflow.schemas.task import TaskCreate, TaskUpdate
from deskflow.utils.helpers import utc_now
from deskflow.utils.validators import require_text, validate_importance

logger = logging.getLogger(__name__)

DEFAULT_IMPORTANCE = 3


class TaskService:
    """Service for task operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_task(
        self,
        task_id: uuid.UUID,
        profile_id: uuid.UUID,
    ) -> Task:
        """
        Get a task whose project belongs to the profile.

        Raises:
            NotFoundError: Missing or owned by someone else
        """
        stmt = (
            select(Task)
            .join(Project, Project.project_id == Task.project_id)
            .where(
                Task.task_id == task_id,
                Project.profile_id == profile_id,
            )
        )
        result = await self.db.execute(stmt)
        task = result.scalar_one_or_none()
        if task is None:
            raise NotFoundError(
                code=ErrorCodes.TASK_NOT_FOUND,
                message="Task not found",
            )
        return task

    async def list_tasks(
        self,
        project_id: uuid.UUID,
        profile_id: uuid.UUID,
    ) -> list[Task]:
        """
        Tasks of a project: status ascending, importance descending,
        earliest due date first.

        Raises:
            NotFoundError: Project not owned by the profile
        """
        await self._check_project(project_id, profile_id)

        stmt = (
            select(Task)
            .where(Task.project_id == project_id)
            .order_by(
                Task.status_id.asc(),
                Task.importance.desc(),
                Task.due_date.asc().nulls_last(),
            )
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_statuses(self) -> list[dict]:
        """All work statuses by id."""
        result = await self.db.execute(select(Status).order_by(Status.status_id))
        return [status.to_api_dict() for status in result.scalars().all()]

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_task(
        self,
        project_id: uuid.UUID,
        profile_id: uuid.UUID,
        data: TaskCreate,
    ) -> Task:
        """
        Create a task in one of the profile's projects.

        Raises:
            NotFoundError: Project not owned by the profile
            ValidationError: Blank name, bad importance, unknown status
        """
        name = require_text(data.name, "name", "Task name")
        await self._check_project(project_id, profile_id)

        status_id = data.status_id or int(WorkStatus.NOT_STARTED)
        await self._check_status(status_id)

        task = Task(
            project_id=project_id,
            name=name,
            description=(data.description or "").strip() or None,
            importance=validate_importance(
                DEFAULT_IMPORTANCE if data.importance is None else data.importance
            ),
            estimated_hours=data.estimated_hours,
            status_id=status_id,
            start_date=data.start_date,
            due_date=data.due_date,
            completed_at=utc_now() if status_id == WorkStatus.COMPLETED else None,
        )
        self.db.add(task)
        await self.db.flush()

        logger.info("Created task %s in project %s", task.task_id, project_id)
        return task

    async def update_task(
        self,
        task_id: uuid.UUID,
        profile_id: uuid.UUID,
        data: TaskUpdate,
    ) -> Task:
        """
        Update only the fields that were sent.

        Raises:
            NotFoundError: Task not owned by the profile
            ValidationError: Blank name, bad importance, unknown status
        """
        task = await self.get_task(task_id, profile_id)
        changes = data.model_dump(exclude_unset=True)

        if "name" in changes:
            changes["name"] = require_text(changes["name"], "name", "Task name")
        if "importance" in changes:
            if changes["importance"] is None:
                raise ValidationError(message="Importance is required", field="importance")
            changes["importance"] = validate_importance(changes["importance"])
        if "status_id" in changes:
            status_id = changes.pop("status_id")
            if status_id is None:
                raise ValidationError(message="Status is required", field="status_id")
            await self._check_status(status_id)
            self._set_status(task, status_id)

        for field, value in changes.items():
            setattr(task, field, value)

        await self.db.flush()
        return task

    async def delete_task(
        self,
        task_id: uuid.UUID,
        profile_id: uuid.UUID,
    ) -> uuid.UUID:
        """
        Delete a task.

        Returns:
            The project the task belonged to
        """
        task = await self.get_task(task_id, profile_id)
        project_id = task.project_id
        await self.db.delete(task)
        await self.db.flush()

        logger.info("Deleted task %s", task_id)
        return project_id

    async def complete_task(self, task_id: uuid.UUID, profile_id: uuid.UUID) -> Task:
        """Mark a task completed and stamp the completion time."""
        task = await self.get_task(task_id, profile_id)
        self._set_status(task, int(WorkStatus.COMPLETED))
        await self.db.flush()
        return task

    async def reopen_task(self, task_id: uuid.UUID, profile_id: uuid.UUID) -> Task:
        """Move a task back to in-progress and clear its completion time."""
        task = await self.get_task(task_id, profile_id)
        self._set_status(task, int(WorkStatus.IN_PROGRESS))
        await self.db.flush()
        return task

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _set_status(task: Task, status_id: int) -> None:
        """Change status, keeping completed_at in step with it."""
        if status_id == WorkStatus.COMPLETED:
            if task.status_id != WorkStatus.COMPLETED or task.completed_at is None:
                task.completed_at = utc_now()
        else:
            task.completed_at = None
        task.status_id = status_id

    async def _check_project(self, project_id: uuid.UUID, profile_id: uuid.UUID) -> None:
        owned = await self.db.scalar(
            select(Project.project_id).where(
                Project.project_id == project_id,
                Project.profile_id == profile_id,
            )
        )
        if owned is None:
            raise NotFoundError(
                code=ErrorCodes.PROJECT_NOT_FOUND,
                message="Project not found",
            )

    async def _check_status(self, status_id: Optional[int]) -> None:
        if status_id is None or await self.db.get(Status, status_id) is None:
            raise ValidationError(message="Unknown status", field="status_id")
