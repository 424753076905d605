"""
Finance API Endpoints
=====================

Expenses, incomes and the financial summary of the signed-in account.
"""

import logging
from datetime import date
from typing import Optional
import uuid

from fastapi import APIRouter, Query, status

from deskflow.dependencies import CurrentSession, DBSession
from deskflow.schemas.common import BaseResponse, ErrorResponse
from deskflow.schemas.finance import ExpenseCreate, IncomeCreate
from deskflow.services.cache import CacheInvalidator
from deskflow.services.finance_service import FinanceService

logger = logging.getLogger(__name__)

router = APIRouter()

CREATE_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid amount, date or currency"},
    404: {"model": ErrorResponse, "description": "Project or currency not found"},
}


# =============================================================================
# Expenses
# =============================================================================

@router.get("/expenses", response_model=BaseResponse)
async def list_expenses(
    session: CurrentSession,
    db: DBSession,
    project_id: Optional[uuid.UUID] = Query(None, alias="projectId"),
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    deductible: Optional[bool] = Query(None),
):
    """Expenses, newest first."""
    expenses = await FinanceService(db).list_expenses(
        session.account_id,
        project_id=project_id,
        date_from=date_from,
        date_to=date_to,
        deductible=deductible,
    )
    return BaseResponse(data=[expense.to_api_dict() for expense in expenses])


@router.post(
    "/expenses",
    response_model=BaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses=CREATE_ERRORS,
)
async def create_expense(payload: ExpenseCreate, session: CurrentSession, db: DBSession):
    expense = await FinanceService(db).create_expense(
        session.account_id,
        session.profile_id,
        payload,
    )
    await db.commit()
    await CacheInvalidator.on_finance_change(str(session.profile_id))
    return BaseResponse(data=expense.to_api_dict(), message="Expense recorded")


@router.delete(
    "/expenses/{expense_id}",
    response_model=BaseResponse,
    responses={404: {"model": ErrorResponse, "description": "Expense not found"}},
)
async def delete_expense(expense_id: uuid.UUID, session: CurrentSession, db: DBSession):
    await FinanceService(db).delete_expense(expense_id, session.account_id)
    await db.commit()
    await CacheInvalidator.on_finance_change(str(session.profile_id))
    return BaseResponse(message="Expense deleted")


# =============================================================================
# Incomes
# =============================================================================

@router.get("/incomes", response_model=BaseResponse)
async def list_incomes(
    session: CurrentSession,
    db: DBSession,
    project_id: Optional[uuid.UUID] = Query(None, alias="projectId"),
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
):
    """Incomes, newest first."""
    incomes = await FinanceService(db).list_incomes(
        session.account_id,
        project_id=project_id,
        date_from=date_from,
        date_to=date_to,
    )
    return BaseResponse(data=[income.to_api_dict() for income in incomes])


@router.post(
    "/incomes",
    response_model=BaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses=CREATE_ERRORS,
)
async def create_income(payload: IncomeCreate, session: CurrentSession, db: DBSession):
    income = await FinanceService(db).create_income(
        session.account_id,
        session.profile_id,
        payload,
    )
    await db.commit()
    await CacheInvalidator.on_finance_change(str(session.profile_id))
    return BaseResponse(data=income.to_api_dict(), message="Income recorded")


@router.delete(
    "/incomes/{income_id}",
    response_model=BaseResponse,
    responses={404: {"model": ErrorResponse, "description": "Income not found"}},
)
async def delete_income(income_id: uuid.UUID, session: CurrentSession, db: DBSession):
    await FinanceService(db).delete_income(income_id, session.account_id)
    await db.commit()
    await CacheInvalidator.on_finance_change(str(session.profile_id))
    return BaseResponse(message="Income deleted")


# =============================================================================
# Summary & form options
# =============================================================================

@router.get("/summary", response_model=BaseResponse)
async def financial_summary(
    session: CurrentSession,
    db: DBSession,
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None),
):
    """
    Income, expense, balance and deductible totals.

    Amounts in different currencies are added together without conversion.
    """
    totals = await FinanceService(db).get_summary(session.account_id, year=year, month=month)
    return BaseResponse(data=totals.to_dict())


@router.get("/currencies", response_model=BaseResponse)
async def list_currencies(session: CurrentSession, db: DBSession):
    return BaseResponse(data=await FinanceService(db).list_currencies())


@router.get("/projects", response_model=BaseResponse)
async def projects_for_select(session: CurrentSession, db: DBSession):
    """Non-archived projects an entry can be linked to."""
    return BaseResponse(data=await FinanceService(db).list_projects_for_select(session.profile_id))
