"""
Client API Endpoints
====================

CRUD for the signed-in profile's clients. Deleting deactivates.
"""

import logging
from typing import Optional
import uuid

from fastapi import APIRouter, Query, status

from deskflow.dependencies import CurrentSession, DBSession
from deskflow.schemas.client import ClientCreate, ClientUpdate
from deskflow.schemas.common import BaseResponse, ErrorResponse
from deskflow.services.cache import CacheInvalidator
from deskflow.services.client_service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=BaseResponse)
async def list_clients(
    session: CurrentSession,
    db: DBSession,
    search: Optional[str] = Query(None, max_length=100),
    client_type_id: Optional[int] = Query(None, alias="clientTypeId"),
    active: Optional[bool] = Query(None),
):
    """List clients with project counters, active first."""
    clients = await ClientService(db).list_clients(
        session.profile_id,
        search=search,
        client_type_id=client_type_id,
        active=active,
    )
    return BaseResponse(data=clients)


@router.get("/stats", response_model=BaseResponse)
async def client_stats(session: CurrentSession, db: DBSession):
    """Total, active, inactive, with and without projects."""
    return BaseResponse(data=await ClientService(db).get_stats(session.profile_id))


@router.get("/types", response_model=BaseResponse)
async def client_types(session: CurrentSession, db: DBSession):
    return BaseResponse(data=await ClientService(db).list_client_types())


@router.get(
    "/{client_id}",
    response_model=BaseResponse,
    responses={404: {"model": ErrorResponse, "description": "Client not found"}},
)
async def get_client(client_id: uuid.UUID, session: CurrentSession, db: DBSession):
    """Client with its type and projects."""
    data = await ClientService(db).get_client_detail(client_id, session.profile_id)
    return BaseResponse(data=data)


@router.post(
    "",
    response_model=BaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Name is required"}},
)
async def create_client(payload: ClientCreate, session: CurrentSession, db: DBSession):
    client = await ClientService(db).create_client(session.profile_id, payload)
    await db.commit()
    await CacheInvalidator.on_client_change(str(session.profile_id))
    return BaseResponse(data=client.to_api_dict(), message="Client created")


@router.patch(
    "/{client_id}",
    response_model=BaseResponse,
    responses={404: {"model": ErrorResponse, "description": "Client not found"}},
)
async def update_client(
    client_id: uuid.UUID,
    payload: ClientUpdate,
    session: CurrentSession,
    db: DBSession,
):
    """Update only the fields sent."""
    client = await ClientService(db).update_client(client_id, session.profile_id, payload)
    await db.commit()
    await CacheInvalidator.on_client_change(str(session.profile_id))
    return BaseResponse(data=client.to_api_dict(), message="Client updated")


@router.delete(
    "/{client_id}",
    response_model=BaseResponse,
    responses={404: {"model": ErrorResponse, "description": "Client not found"}},
)
async def deactivate_client(client_id: uuid.UUID, session: CurrentSession, db: DBSession):
    """Soft delete: the client stays on record as inactive."""
    client = await ClientService(db).set_active(client_id, session.profile_id, active=False)
    await db.commit()
    await CacheInvalidator.on_client_change(str(session.profile_id))
    return BaseResponse(data=client.to_api_dict(), message="Client deactivated")


@router.post(
    "/{client_id}/reactivate",
    response_model=BaseResponse,
    responses={404: {"model": ErrorResponse, "description": "Client not found"}},
)
async def reactivate_client(client_id: uuid.UUID, session: CurrentSession, db: DBSession):
    client = await ClientService(db).set_active(client_id, session.profile_id, active=True)
    await db.commit()
    await CacheInvalidator.on_client_change(str(session.profile_id))
    return BaseResponse(data=client.to_api_dict(), message="Client reactivated")
