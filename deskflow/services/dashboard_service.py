"""
Dashboard Service
=================

Aggregates for the home screen: client/project/task counters, recent
projects, upcoming tasks and the portfolio finance block.

The whole overview is cached per profile and dropped by the cache
invalidators whenever a client, project, task or finance entry changes.
"""

import logging
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from deskflow.core import metrics
from deskflow.models.catalog import Status, WorkStatus
from deskflow.models.client import Client
from deskflow.models.finance import Expense
from deskflow.models.project import Project, Task
from deskflow.services.cache import CacheKeys, CacheManager

logger = logging.getLogger(__name__)

RECENT_PROJECTS_LIMIT = 5
UPCOMING_TASKS_LIMIT = 5


class DashboardService:
    """Service for dashboard aggregates."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_overview(self, profile_id: uuid.UUID) -> dict:
        """Full dashboard payload, served from cache when possible."""
        cache_key = CacheKeys.dashboard(str(profile_id))
        cached = await CacheManager.get(cache_key)
        if cached is not None:
            return cached

        overview = {
            "stats": await self.get_stats(profile_id),
            "recentProjects": await self.get_recent_projects(profile_id),
            "upcomingTasks": await self.get_upcoming_tasks(profile_id),
            "finances": await self.get_portfolio_finances(profile_id),
        }
        await CacheManager.set(cache_key, overview, ttl=CacheManager.TTL_SHORT)
        return overview

    async def get_stats(self, profile_id: uuid.UUID) -> dict:
        """Counters for clients, projects (by status) and tasks."""
        clients_total = await self.db.scalar(
            select(func.count(Client.client_id)).where(Client.profile_id == profile_id)
        )
        clients_active = await self.db.scalar(
            select(func.count(Client.client_id)).where(
                Client.profile_id == profile_id,
                Client.is_active.is_(True),
            )
        )

        rows = await self.db.execute(
            select(Status.status_id, Status.name, func.count(Project.project_id))
            .join(Project, Project.status_id == Status.status_id)
            .where(Project.profile_id == profile_id)
            .group_by(Status.status_id, Status.name)
            .order_by(Status.status_id)
        )
        by_status = {}
        by_status_id = {}
        for status_id, name, count in rows.all():
            by_status[name] = count
            by_status_id[status_id] = count

        task_rows = await self.db.execute(
            select(Task.status_id, func.count(Task.task_id))
            .join(Project, Project.project_id == Task.project_id)
            .where(Project.profile_id == profile_id)
            .group_by(Task.status_id)
        )
        tasks_total = 0
        tasks_completed = 0
        for status_id, count in task_rows.all():
            tasks_total += count
            if status_id == WorkStatus.COMPLETED:
                tasks_completed += count

        return {
            "clients": {
                "total": clients_total or 0,
                "active": clients_active or 0,
            },
            "projects": {
                "total": sum(by_status_id.values()),
                "byStatus": by_status,
                "inProgress": by_status_id.get(WorkStatus.IN_PROGRESS, 0),
                "completed": by_status_id.get(WorkStatus.COMPLETED, 0),
            },
            "tasks": {
                "total": tasks_total,
                "completed": tasks_completed,
                "pending": tasks_total - tasks_completed,
            },
        }

    async def get_recent_projects(self, profile_id: uuid.UUID) -> list[dict]:
        """Most recently started non-archived projects with their progress."""
        result = await self.db.execute(
            select(Project)
            .options(
                selectinload(Project.client),
                selectinload(Project.status),
                selectinload(Project.tasks),
            )
            .where(Project.profile_id == profile_id, Project.is_archived.is_(False))
            .order_by(Project.start_date.desc().nulls_last(), Project.created_at.desc())
            .limit(RECENT_PROJECTS_LIMIT)
        )
        return [
            {
                "id": str(project.project_id),
                "name": project.name,
                "client": project.client.name if project.client else None,
                "status": project.status.to_api_dict() if project.status else None,
                "progress": metrics.weighted_progress(project.tasks),
                "dueDate": project.due_date.isoformat() if project.due_date else None,
            }
            for project in result.scalars().all()
        ]

    async def get_upcoming_tasks(self, profile_id: uuid.UUID) -> list[dict]:
        """Incomplete tasks, most important first, then earliest due."""
        result = await self.db.execute(
            select(Task, Project.name)
            .join(Project, Project.project_id == Task.project_id)
            .where(
                Project.profile_id == profile_id,
                or_(Task.status_id.is_(None), Task.status_id != WorkStatus.COMPLETED),
            )
            .order_by(Task.importance.desc(), Task.due_date.asc().nulls_last())
            .limit(UPCOMING_TASKS_LIMIT)
        )
        return [
            {**task.to_api_dict(), "projectName": project_name}
            for task, project_name in result.all()
        ]

    async def get_portfolio_finances(self, profile_id: uuid.UUID) -> dict:
        """Budgets against recorded project expenses, plus paid/pending counts."""
        projects = (
            await self.db.execute(
                select(Project.budget, Project.is_paid).where(Project.profile_id == profile_id)
            )
        ).all()

        total_budget = sum((metrics.to_decimal(budget) for budget, _ in projects), metrics.ZERO)
        paid = sum(1 for _, is_paid in projects if is_paid)

        expenses = (
            await self.db.execute(
                select(Expense)
                .join(Project, Project.project_id == Expense.project_id)
                .where(Project.profile_id == profile_id)
            )
        ).scalars().all()
        spent = metrics.financial_summary(expenses, []).total_expense
        net = metrics.project_net_profit(total_budget, spent)

        return {
            "totalBudget": float(total_budget),
            "totalExpenses": float(spent),
            "balance": float(net.net_profit),
            "percentSpent": float(net.percent_spent),
            "paidProjects": paid,
            "pendingProjects": len(projects) - paid,
        }
