"""
Project Schemas
===============

Pydantic schemas for project endpoints.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    """Request schema for creating a project."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, max_length=150)
    client_id: Optional[uuid.UUID] = Field(None, alias="clientId")
    project_type_id: Optional[int] = Field(None, alias="projectTypeId")
    budget: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    start_date: Optional[date] = Field(None, alias="startDate")
    due_date: Optional[date] = Field(None, alias="dueDate")


class ProjectUpdate(BaseModel):
    """Request schema for updating a project. Only sent fields change."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, max_length=150)
    client_id: Optional[uuid.UUID] = Field(None, alias="clientId")
    project_type_id: Optional[int] = Field(None, alias="projectTypeId")
    status_id: Optional[int] = Field(None, alias="statusId")
    budget: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    is_paid: Optional[bool] = Field(None, alias="isPaid")
    start_date: Optional[date] = Field(None, alias="startDate")
    due_date: Optional[date] = Field(None, alias="dueDate")
