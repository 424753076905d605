"""
Task Schemas
============

Pydantic schemas for task endpoints. Importance is range-checked by the
service so it reports the same message for create and update.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskCreate(BaseModel):
    """Request schema for creating a task."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, max_length=150)
    description: Optional[str] = None
    importance: Optional[int] = 3
    estimated_hours: Optional[Decimal] = Field(None, alias="estimatedHours", ge=0)
    status_id: Optional[int] = Field(None, alias="statusId")
    start_date: Optional[date] = Field(None, alias="startDate")
    due_date: Optional[date] = Field(None, alias="dueDate")


class TaskUpdate(BaseModel):
    """Request schema for updating a task. Only sent fields change."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, max_length=150)
    description: Optional[str] = None
    importance: Optional[int] = None
    estimated_hours: Optional[Decimal] = Field(None, alias="estimatedHours", ge=0)
    status_id: Optional[int] = Field(None, alias="statusId")
    start_date: Optional[date] = Field(None, alias="startDate")
    due_date: Optional[date] = Field(None, alias="dueDate")
