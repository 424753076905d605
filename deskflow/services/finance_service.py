"""
Finance Service
===============

Business logic for expenses and incomes. Entries are owned by the account
that recorded them; an optional project link must point at one of the
account's own projects.
"""

import logging
from datetime import date
from typing import Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from deskflow.core import metrics
from deskflow.core.errors import ErrorCodes, NotFoundError, ValidationError
from deskflow.models.catalog import Currency
from deskflow.models.finance import Expense, Income
from deskflow.models.project import Project
from deskflow.schemas.finance import ExpenseCreate, IncomeCreate
from deskflow.utils.helpers import clean_optional, month_range
from deskflow.utils.validators import validate_positive_amount

logger = logging.getLogger(__name__)


class FinanceService:
    """Service for expense and income operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_expenses(
        self,
        account_id: uuid.UUID,
        project_id: Optional[uuid.UUID] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        deductible: Optional[bool] = None,
    ) -> list[Expense]:
        """Expenses of the account, newest first."""
        stmt = select(Expense).where(Expense.account_id == account_id)
        stmt = self._apply_filters(stmt, Expense, project_id, date_from, date_to)
        if deductible is not None:
            stmt = stmt.where(Expense.is_deductible == deductible)
        stmt = stmt.order_by(Expense.entry_date.desc(), Expense.created_at.desc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_incomes(
        self,
        account_id: uuid.UUID,
        project_id: Optional[uuid.UUID] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Income]:
        """Incomes of the account, newest first."""
        stmt = select(Income).where(Income.account_id == account_id)
        stmt = self._apply_filters(stmt, Income, project_id, date_from, date_to)
        stmt = stmt.order_by(Income.entry_date.desc(), Income.created_at.desc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_summary(
        self,
        account_id: uuid.UUID,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> metrics.FinancialTotals:
        """
        Totals over the account's entries, optionally for one month or year.

        Raises:
            ValidationError: Month given without a year, or out of range
        """
        date_from = date_to = None
        if month is not None and year is None:
            raise ValidationError(message="Year is required with month", field="year")
        if month is not None and not 1 <= month <= 12:
            raise ValidationError(message="Month must be between 1 and 12", field="month")
        if year is not None:
            date_from, date_to = month_range(year, month)

        expenses = await self.list_expenses(account_id, date_from=date_from, date_to=date_to)
        incomes = await self.list_incomes(account_id, date_from=date_from, date_to=date_to)
        return metrics.financial_summary(expenses, incomes)

    async def list_currencies(self) -> list[dict]:
        """All currencies by code."""
        result = await self.db.execute(select(Currency).order_by(Currency.code))
        return [currency.to_api_dict() for currency in result.scalars().all()]

    async def list_projects_for_select(self, profile_id: uuid.UUID) -> list[dict]:
        """Non-archived projects of the profile for entry forms."""
        result = await self.db.execute(
            select(Project)
            .where(Project.profile_id == profile_id, Project.is_archived.is_(False))
            .order_by(Project.name)
        )
        return [
            {"id": str(project.project_id), "name": project.name}
            for project in result.scalars().all()
        ]

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_expense(
        self,
        account_id: uuid.UUID,
        profile_id: uuid.UUID,
        data: ExpenseCreate,
    ) -> Expense:
        """
        Record an expense.

        Raises:
            ValidationError: Amount <= 0, missing date or currency
            NotFoundError: Project not owned by the caller
        """
        fields = await self._validated_fields(profile_id, data)
        expense = Expense(
            account_id=account_id,
            is_deductible=bool(data.is_deductible),
            **fields,
        )
        self.db.add(expense)
        await self.db.flush()

        logger.info("Recorded expense %s for account %s", expense.expense_id, account_id)
        return expense

    async def create_income(
        self,
        account_id: uuid.UUID,
        profile_id: uuid.UUID,
        data: IncomeCreate,
    ) -> Income:
        """
        Record an income.

        Raises:
            ValidationError: Amount <= 0, missing date or currency
            NotFoundError: Project not owned by the caller
        """
        fields = await self._validated_fields(profile_id, data)
        income = Income(account_id=account_id, **fields)
        self.db.add(income)
        await self.db.flush()

        logger.info("Recorded income %s for account %s", income.income_id, account_id)
        return income

    async def delete_expense(self, expense_id: uuid.UUID, account_id: uuid.UUID) -> None:
        """Delete one of the account's expenses."""
        expense = await self.db.scalar(
            select(Expense).where(
                Expense.expense_id == expense_id,
                Expense.account_id == account_id,
            )
        )
        if expense is None:
            raise NotFoundError(
                code=ErrorCodes.EXPENSE_NOT_FOUND,
                message="Expense not found",
            )
        await self.db.delete(expense)
        await self.db.flush()

    async def delete_income(self, income_id: uuid.UUID, account_id: uuid.UUID) -> None:
        """Delete one of the account's incomes."""
        income = await self.db.scalar(
            select(Income).where(
                Income.income_id == income_id,
                Income.account_id == account_id,
            )
        )
        if income is None:
            raise NotFoundError(
                code=ErrorCodes.INCOME_NOT_FOUND,
                message="Income not found",
            )
        await self.db.delete(income)
        await self.db.flush()

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _apply_filters(stmt, model, project_id, date_from, date_to):
        if project_id is not None:
            stmt = stmt.where(model.project_id == project_id)
        if date_from is not None:
            stmt = stmt.where(model.entry_date >= date_from)
        if date_to is not None:
            stmt = stmt.where(model.entry_date <= date_to)
        return stmt

    async def _validated_fields(
        self,
        profile_id: uuid.UUID,
        data: IncomeCreate,
    ) -> dict:
        amount = validate_positive_amount(data.amount)

        if data.entry_date is None:
            raise ValidationError(message="Date is required", field="date")

        if data.currency_id is None:
            raise ValidationError(message="Currency is required", field="currency_id")
        if await self.db.get(Currency, data.currency_id) is None:
            raise NotFoundError(
                code=ErrorCodes.CURRENCY_NOT_FOUND,
                message="Currency not found",
            )

        if data.project_id is not None:
            owned = await self.db.scalar(
                select(Project.project_id).where(
                    Project.project_id == data.project_id,
                    Project.profile_id == profile_id,
                )
            )
            if owned is None:
                raise NotFoundError(
                    code=ErrorCodes.PROJECT_NOT_FOUND,
                    message="Project not found",
                )

        return {
            "amount": amount,
            "entry_date": data.entry_date,
            "description": clean_optional(data.description),
            "currency_id": data.currency_id,
            "project_id": data.project_id,
        }
