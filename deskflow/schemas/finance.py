"""
Finance Schemas
===============

Pydantic schemas for expense and income endpoints.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field


class IncomeCreate(BaseModel):
    """Request schema for recording an income."""

    model_config = ConfigDict(populate_by_name=True)

    amount: Optional[Decimal] = Field(None, max_digits=14, decimal_places=2)
    entry_date: Optional[date] = Field(None, alias="date")
    description: Optional[str] = None
    currency_id: Optional[int] = Field(None, alias="currencyId")
    project_id: Optional[uuid.UUID] = Field(None, alias="projectId")


class ExpenseCreate(IncomeCreate):
    """Request schema for recording an expense."""

    is_deductible: bool = Field(default=False, alias="isDeductible")
