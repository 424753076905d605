"""
Client Service
==============

Business logic for the freelancer's client list. Every query is scoped to
the owning profile.
"""

import logging
from typing import Optional
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from deskflow.core.errors import ErrorCodes, NotFoundError, ValidationError
from deskflow.models.catalog import ClientType, WorkStatus
from deskflow.models.client import Client
from deskflow.models.project import Project
from deskflow.schemas.client import ClientCreate, ClientUpdate
from deskflow.services.cache import CacheKeys, CacheManager
from deskflow.utils.helpers import utc_now
from deskflow.utils.validators import require_text

logger = logging.getLogger(__name__)


class ClientService:
    """Service for client operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_clients(
        self,
        profile_id: uuid.UUID,
        search: Optional[str] = None,
        client_type_id: Optional[int] = None,
        active: Optional[bool] = None,
    ) -> list[dict]:
        """
        List clients with project counters.

        Active clients first, then by name. ``search`` matches name, email
        or phone case-insensitively.
        """
        project_count = (
            select(func.count(Project.project_id))
            .where(Project.client_id == Client.client_id)
            .correlate(Client)
            .scalar_subquery()
        )
        active_project_count = (
            select(func.count(Project.project_id))
            .where(
                Project.client_id == Client.client_id,
                Project.status_id != WorkStatus.COMPLETED,
            )
            .correlate(Client)
            .scalar_subquery()
        )

        stmt = (
            select(Client, project_count, active_project_count)
            .options(selectinload(Client.client_type))
            .where(Client.profile_id == profile_id)
            .order_by(Client.is_active.desc(), Client.name.asc())
        )

        if search and search.strip():
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    Client.name.ilike(pattern),
                    Client.email.ilike(pattern),
                    Client.phone.ilike(pattern),
                )
            )
        if client_type_id is not None:
            stmt = stmt.where(Client.client_type_id == client_type_id)
        if active is not None:
            stmt = stmt.where(Client.is_active == active)

        result = await self.db.execute(stmt)

        clients = []
        for client, total, active_total in result.all():
            data = client.to_api_dict()
            data["clientType"] = client.client_type.to_api_dict() if client.client_type else None
            data["projectCount"] = total or 0
            data["activeProjectCount"] = active_total or 0
            clients.append(data)
        return clients

    async def get_client(
        self,
        client_id: uuid.UUID,
        profile_id: uuid.UUID,
        with_projects: bool = False,
    ) -> Client:
        """
        Get a client owned by the profile.

        Raises:
            NotFoundError: Missing or owned by someone else
        """
        stmt = select(Client).where(
            Client.client_id == client_id,
            Client.profile_id == profile_id,
        )
        if with_projects:
            stmt = stmt.options(
                selectinload(Client.client_type),
                selectinload(Client.projects).selectinload(Project.status),
            ).execution_options(populate_existing=True)

        result = await self.db.execute(stmt)
        client = result.scalar_one_or_none()
        if client is None:
            raise NotFoundError(
                code=ErrorCodes.CLIENT_NOT_FOUND,
                message="Client not found",
            )
        return client

    async def get_client_detail(
        self,
        client_id: uuid.UUID,
        profile_id: uuid.UUID,
    ) -> dict:
        """Client with its type and projects."""
        client = await self.get_client(client_id, profile_id, with_projects=True)
        data = client.to_api_dict()
        data["clientType"] = client.client_type.to_api_dict() if client.client_type else None
        data["projects"] = [
            {
                **project.to_api_dict(),
                "status": project.status.to_api_dict() if project.status else None,
            }
            for project in sorted(
                client.projects,
                key=lambda p: (p.start_date is None, p.start_date),
                reverse=True,
            )
        ]
        return data

    async def get_stats(self, profile_id: uuid.UUID) -> dict:
        """Client counters for the profile."""
        cache_key = CacheKeys.client_stats(str(profile_id))
        cached = await CacheManager.get(cache_key)
        if cached is not None:
            return cached

        total = await self.db.scalar(
            select(func.count(Client.client_id)).where(Client.profile_id == profile_id)
        )
        active = await self.db.scalar(
            select(func.count(Client.client_id)).where(
                Client.profile_id == profile_id,
                Client.is_active.is_(True),
            )
        )
        with_projects = await self.db.scalar(
            select(func.count(func.distinct(Client.client_id)))
            .join(Project, Project.client_id == Client.client_id)
            .where(
                Client.profile_id == profile_id,
                Client.is_active.is_(True),
            )
        )

        total = total or 0
        active = active or 0
        with_projects = with_projects or 0
        stats = {
            "total": total,
            "active": active,
            "inactive": total - active,
            "withProjects": with_projects,
            "withoutProjects": active - with_projects,
        }
        await CacheManager.set(cache_key, stats, ttl=CacheManager.TTL_SHORT)
        return stats

    async def list_client_types(self) -> list[dict]:
        """All client types, by name."""
        result = await self.db.execute(select(ClientType).order_by(ClientType.name))
        return [client_type.to_api_dict() for client_type in result.scalars().all()]

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_client(
        self,
        profile_id: uuid.UUID,
        data: ClientCreate,
    ) -> Client:
        """
        Create an active client.

        Raises:
            ValidationError: Blank name or unknown client type
        """
        name = require_text(data.name, "name", "Client name")
        await self._check_client_type(data.client_type_id)

        client = Client(
            profile_id=profile_id,
            name=name,
            email=data.email,
            phone=data.phone,
            client_type_id=data.client_type_id,
            is_active=True,
            registered_at=utc_now(),
        )
        self.db.add(client)
        await self.db.flush()

        logger.info("Created client %s for profile %s", client.client_id, profile_id)
        return client

    async def update_client(
        self,
        client_id: uuid.UUID,
        profile_id: uuid.UUID,
        data: ClientUpdate,
    ) -> Client:
        """
        Update only the fields that were sent.

        Raises:
            NotFoundError: Client not owned by the profile
            ValidationError: Blank name or unknown client type
        """
        client = await self.get_client(client_id, profile_id)
        changes = data.model_dump(exclude_unset=True)

        if "name" in changes:
            changes["name"] = require_text(changes["name"], "name", "Client name")
        if "client_type_id" in changes:
            await self._check_client_type(changes["client_type_id"])
        if "is_active" in changes and changes["is_active"] is None:
            del changes["is_active"]

        for field, value in changes.items():
            setattr(client, field, value)

        await self.db.flush()
        return client

    async def set_active(
        self,
        client_id: uuid.UUID,
        profile_id: uuid.UUID,
        active: bool,
    ) -> Client:
        """Soft delete (active=False) or reactivate a client."""
        client = await self.get_client(client_id, profile_id)
        client.is_active = active
        await self.db.flush()

        logger.info(
            "%s client %s",
            "Reactivated" if active else "Deactivated",
            client_id,
        )
        return client

    async def _check_client_type(self, client_type_id: Optional[int]) -> None:
        if client_type_id is None:
            return
        if await self.db.get(ClientType, client_type_id) is None:
            raise ValidationError(
                message="Unknown client type",
                field="client_type_id",
            )
