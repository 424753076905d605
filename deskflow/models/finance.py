"""
Finance Models
==============

SQLAlchemy models for expenses and incomes.

Amounts keep the currency they were recorded in; nothing converts between
currencies.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from deskflow.db.base import Base, TimestampMixin
from deskflow.models.catalog import Currency

if TYPE_CHECKING:
    from deskflow.models.project import Project


class _FinanceEntryMixin:
    """Columns shared by expenses and incomes."""

    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    entry_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.account_id", ondelete="CASCADE"),
        nullable=False,
    )
    project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("projects.project_id", ondelete="SET NULL"),
        nullable=True,
    )
    currency_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("currencies.currency_id"),
        nullable=False,
    )

    def _base_api_dict(self) -> dict:
        return {
            "amount": float(self.amount),
            "date": self.entry_date.isoformat(),
            "description": self.description,
            "projectId": str(self.project_id) if self.project_id else None,
            "currencyId": self.currency_id,
        }


class Expense(_FinanceEntryMixin, Base, TimestampMixin):
    """Money spent, optionally tied to a project."""

    __tablename__ = "expenses"

    expense_id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )
    is_deductible: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    project: Mapped[Optional["Project"]] = relationship("Project", back_populates="expenses")
    currency: Mapped["Currency"] = relationship("Currency")

    __table_args__ = (
        Index("idx_expenses_account_date", "account_id", "date"),
    )

    def to_api_dict(self) -> dict:
        data = {"id": str(self.expense_id), **self._base_api_dict()}
        data["isDeductible"] = self.is_deductible
        return data


class Income(_FinanceEntryMixin, Base, TimestampMixin):
    """Money received, optionally tied to a project."""

    __tablename__ = "incomes"

    income_id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    project: Mapped[Optional["Project"]] = relationship("Project", back_populates="incomes")
    currency: Mapped["Currency"] = relationship("Currency")

    __table_args__ = (
        Index("idx_incomes_account_date", "account_id", "date"),
    )

    def to_api_dict(self) -> dict:
        return {"id": str(self.income_id), **self._base_api_dict()}
