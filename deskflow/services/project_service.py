"""
Project Service
===============

Business logic for projects: listing with derived progress and timing,
detail with financial figures, CRUD, and archive/pin toggles.

Projects are owned by a profile; every query filters on it.
"""

import logging
from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from deskflow.core import metrics
from deskflow.core.errors import ErrorCodes, NotFoundError, ValidationError
from deskflow.models.catalog import ProjectType, Status, WorkStatus
from deskflow.models.client import Client
from deskflow.models.finance import Expense, Income
from deskflow.models.project import Project, Task
from deskflow.schemas.project import ProjectCreate, ProjectUpdate
from deskflow.utils.helpers import today
from deskflow.utils.validators import require_text

logger = logging.getLogger(__name__)


def _summary_dict(project: Project, now: datetime) -> dict:
    """List item: base fields, relations, progress and timing."""
    data = project.to_api_dict()
    data["client"] = (
        {"id": str(project.client.client_id), "name": project.client.name}
        if project.client
        else None
    )
    data["projectType"] = project.project_type.to_api_dict() if project.project_type else None
    data["status"] = project.status.to_api_dict() if project.status else None
    data["taskCount"] = len(project.tasks)
    data["completedTaskCount"] = sum(1 for task in project.tasks if metrics.is_done(task))
    data["progress"] = metrics.weighted_progress(project.tasks)
    data["timing"] = metrics.classify_timing(project.tasks, now).value
    return data


class ProjectService:
    """Service for project operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_projects(
        self,
        profile_id: uuid.UUID,
        now: datetime,
        archived: Optional[bool] = None,
        timing: Optional[metrics.TimingStatus] = None,
    ) -> list[dict]:
        """
        List projects, pinned first, then most recent start date.

        Args:
            profile_id: Owner
            now: Reference time for the timing classification
            archived: Filter on the archived flag (None = both)
            timing: Keep only projects with this timing classification
        """
        stmt = (
            select(Project)
            .options(
                selectinload(Project.client),
                selectinload(Project.project_type),
                selectinload(Project.status),
                selectinload(Project.tasks),
            )
            .where(Project.profile_id == profile_id)
            .order_by(
                Project.is_pinned.desc(),
                Project.start_date.desc().nulls_last(),
                Project.created_at.desc(),
            )
        )
        if archived is not None:
            stmt = stmt.where(Project.is_archived == archived)

        result = await self.db.execute(stmt)
        projects = [_summary_dict(project, now) for project in result.scalars().all()]

        if timing is not None:
            projects = [p for p in projects if p["timing"] == timing.value]
        return projects

    async def get_project(
        self,
        project_id: uuid.UUID,
        profile_id: uuid.UUID,
        with_details: bool = False,
    ) -> Project:
        """
        Get a project owned by the profile.

        Raises:
            NotFoundError: Missing or owned by someone else
        """
        stmt = select(Project).where(
            Project.project_id == project_id,
            Project.profile_id == profile_id,
        )
        if with_details:
            stmt = stmt.options(
                selectinload(Project.client),
                selectinload(Project.project_type),
                selectinload(Project.status),
                selectinload(Project.tasks),
                selectinload(Project.expenses),
            ).execution_options(populate_existing=True)

        result = await self.db.execute(stmt)
        project = result.scalar_one_or_none()
        if project is None:
            raise NotFoundError(
                code=ErrorCodes.PROJECT_NOT_FOUND,
                message="Project not found",
            )
        return project

    async def get_project_detail(
        self,
        project_id: uuid.UUID,
        profile_id: uuid.UUID,
        now: datetime,
    ) -> dict:
        """Project with tasks, expenses and every derived figure."""
        project = await self.get_project(project_id, profile_id, with_details=True)

        tasks = sorted(
            project.tasks,
            key=lambda t: (t.status_id, -(t.importance or 0), t.due_date is None, t.due_date),
        )
        expenses = sorted(project.expenses, key=lambda e: e.entry_date, reverse=True)
        total_expenses = metrics.financial_summary(expenses, []).total_expense

        data = _summary_dict(project, now)
        data["tasks"] = [task.to_api_dict() for task in tasks]
        data["expenses"] = [expense.to_api_dict() for expense in expenses]
        data["totalExpenses"] = float(total_expenses)
        data["netProfit"] = metrics.project_net_profit(project.budget, total_expenses).to_dict()
        data["hours"] = metrics.estimated_hours(project.tasks)
        data["importanceBreakdown"] = metrics.importance_breakdown(project.tasks)
        return data

    async def list_project_types(self) -> list[dict]:
        """Active project types, by name."""
        result = await self.db.execute(
            select(ProjectType)
            .where(ProjectType.is_active.is_(True))
            .order_by(ProjectType.name)
        )
        return [project_type.to_api_dict() for project_type in result.scalars().all()]

    async def list_active_clients(self, profile_id: uuid.UUID) -> list[dict]:
        """Active clients of the profile for project forms."""
        result = await self.db.execute(
            select(Client)
            .where(Client.profile_id == profile_id, Client.is_active.is_(True))
            .order_by(Client.name)
        )
        return [
            {"id": str(client.client_id), "name": client.name}
            for client in result.scalars().all()
        ]

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_project(
        self,
        profile_id: uuid.UUID,
        data: ProjectCreate,
    ) -> Project:
        """
        Create a project for one of the profile's clients.

        Defaults: not started, starts today, not archived/pinned/paid.

        Raises:
            ValidationError: Blank name, missing client, unknown project type
            NotFoundError: Client not owned by the profile
        """
        name = require_text(data.name, "name", "Project name")
        if data.client_id is None:
            raise ValidationError(message="Client is required", field="client_id")

        await self._check_client(data.client_id, profile_id)
        await self._check_project_type(data.project_type_id)

        project = Project(
            profile_id=profile_id,
            client_id=data.client_id,
            project_type_id=data.project_type_id,
            status_id=int(WorkStatus.NOT_STARTED),
            name=name,
            budget=data.budget,
            is_archived=False,
            is_pinned=False,
            is_paid=False,
            start_date=data.start_date or today(),
            due_date=data.due_date,
        )
        self.db.add(project)
        await self.db.flush()

        logger.info("Created project %s for profile %s", project.project_id, profile_id)
        return project

    async def update_project(
        self,
        project_id: uuid.UUID,
        profile_id: uuid.UUID,
        data: ProjectUpdate,
    ) -> Project:
        """
        Update only the fields that were sent.

        Raises:
            NotFoundError: Project or new client not owned by the profile
            ValidationError: Blank name, unknown status or project type
        """
        project = await self.get_project(project_id, profile_id)
        changes = data.model_dump(exclude_unset=True)

        if "name" in changes:
            changes["name"] = require_text(changes["name"], "name", "Project name")
        if "client_id" in changes:
            if changes["client_id"] is None:
                raise ValidationError(message="Client is required", field="client_id")
            await self._check_client(changes["client_id"], profile_id)
        if "project_type_id" in changes:
            await self._check_project_type(changes["project_type_id"])
        if "status_id" in changes:
            await self._check_status(changes["status_id"])
        if "is_paid" in changes and changes["is_paid"] is None:
            del changes["is_paid"]

        for field, value in changes.items():
            setattr(project, field, value)

        await self.db.flush()
        return project

    async def delete_project(
        self,
        project_id: uuid.UUID,
        profile_id: uuid.UUID,
    ) -> None:
        """
        Delete a project and its tasks; detach its expenses and incomes.

        All statements run in the request transaction, so a failure in any
        of them rolls back the whole delete.

        Raises:
            NotFoundError: Project not owned by the profile
        """
        project = await self.get_project(project_id, profile_id)

        await self.db.execute(delete(Task).where(Task.project_id == project.project_id))
        await self.db.execute(
            update(Expense)
            .where(Expense.project_id == project.project_id)
            .values(project_id=None)
        )
        await self.db.execute(
            update(Income)
            .where(Income.project_id == project.project_id)
            .values(project_id=None)
        )
        await self.db.delete(project)
        await self.db.flush()

        logger.info("Deleted project %s", project_id)

    async def toggle_archived(
        self,
        project_id: uuid.UUID,
        profile_id: uuid.UUID,
    ) -> Project:
        """Flip the archived flag."""
        project = await self.get_project(project_id, profile_id)
        project.is_archived = not project.is_archived
        await self.db.flush()
        return project

    async def toggle_pinned(
        self,
        project_id: uuid.UUID,
        profile_id: uuid.UUID,
    ) -> Project:
        """Flip the pinned flag."""
        project = await self.get_project(project_id, profile_id)
        project.is_pinned = not project.is_pinned
        await self.db.flush()
        return project

    # =========================================================================
    # Reference checks
    # =========================================================================

    async def _check_client(self, client_id: uuid.UUID, profile_id: uuid.UUID) -> None:
        owned = await self.db.scalar(
            select(Client.client_id).where(
                Client.client_id == client_id,
                Client.profile_id == profile_id,
            )
        )
        if owned is None:
            raise NotFoundError(
                code=ErrorCodes.CLIENT_NOT_FOUND,
                message="Client not found",
            )

    async def _check_project_type(self, project_type_id: Optional[int]) -> None:
        if project_type_id is None:
            return
        if await self.db.get(ProjectType, project_type_id) is None:
            raise ValidationError(message="Unknown project type", field="project_type_id")

    async def _check_status(self, status_id: Optional[int]) -> None:
        if status_id is None:
            raise ValidationError(message="Status is required", field="status_id")
        if await self.db.get(Status, status_id) is None:
            raise ValidationError(message="Unknown status", field="status_id")
