"""
Derived Metrics
===============

Pure functions computing project and finance figures from fetched records.

Nothing here touches the database or the clock; callers pass the records
and, where time matters, ``now``. Records are read by attribute, so ORM
instances and lightweight stand-ins both work.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Iterable, Optional

from deskflow.models.catalog import WorkStatus

DEFAULT_IMPORTANCE = 1
IMPORTANCE_LEVELS = (5, 4, 3, 2, 1)

ZERO = Decimal("0")


class TimingStatus(str, Enum):
    """Schedule classification of a project."""
    LATE = "late"
    EARLY = "early"
    ON_TIME = "on-time"


@dataclass(frozen=True)
class FinancialTotals:
    """Aggregate over a set of expenses and incomes."""

    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    deductible_expenses: Decimal

    def to_dict(self) -> dict[str, float]:
        return {
            "totalIncome": float(self.total_income),
            "totalExpense": float(self.total_expense),
            "balance": float(self.balance),
            "deductibleExpenses": float(self.deductible_expenses),
        }


@dataclass(frozen=True)
class NetProfit:
    """Budget left over after a project's expenses."""

    net_profit: Decimal
    percent_spent: Decimal

    def to_dict(self) -> dict[str, float]:
        return {
            "netProfit": float(self.net_profit),
            "percentSpent": float(self.percent_spent),
        }


# =============================================================================
# Helpers
# =============================================================================

def to_decimal(value: Any) -> Decimal:
    """Coerce a stored amount (Decimal, int, float, str or None) to Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _importance(task: Any) -> int:
    return getattr(task, "importance", None) or DEFAULT_IMPORTANCE


def is_done(task: Any) -> bool:
    """A task is done when its status is the completed ordinal."""
    return getattr(task, "status_id", None) == WorkStatus.COMPLETED


def _as_date(value: Optional[Any]) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# =============================================================================
# Progress & timing
# =============================================================================

def weighted_progress(tasks: Iterable[Any]) -> int:
    """
    Importance-weighted completion percentage.

    Each task weighs its importance (missing importance weighs 1).
    Returns an integer in [0, 100], 0 for an empty set.
    """
    total_weight = 0
    done_weight = 0
    for task in tasks:
        weight = _importance(task)
        total_weight += weight
        if is_done(task):
            done_weight += weight

    if total_weight == 0:
        return 0

    return _round_half_up(Decimal(done_weight) * 100 / Decimal(total_weight))


def classify_timing(tasks: Iterable[Any], now: datetime) -> TimingStatus:
    """
    Classify a project's schedule from its tasks.

    - late: any incomplete task is past its due date (always wins)
    - early: non-empty, every task done, and none whose completion date is
      known finished on or after its due date
    - on-time: everything else, including an empty task list
    """
    tasks = list(tasks)
    today = _as_date(now)

    for task in tasks:
        due = _as_date(getattr(task, "due_date", None))
        if not is_done(task) and due is not None and due < today:
            return TimingStatus.LATE

    if not tasks or not all(is_done(task) for task in tasks):
        return TimingStatus.ON_TIME

    for task in tasks:
        due = _as_date(getattr(task, "due_date", None))
        completed = _as_date(getattr(task, "completed_at", None))
        if due is not None and completed is not None and completed >= due:
            return TimingStatus.ON_TIME

    return TimingStatus.EARLY


def importance_breakdown(tasks: Iterable[Any]) -> list[dict[str, int]]:
    """
    Per-importance-level progress, highest level first.

    Levels without tasks are omitted.
    """
    buckets: dict[int, list[int]] = {level: [0, 0] for level in IMPORTANCE_LEVELS}
    for task in tasks:
        level = _importance(task)
        bucket = buckets.setdefault(level, [0, 0])
        bucket[0] += 1
        if is_done(task):
            bucket[1] += 1

    breakdown = []
    for level in sorted(buckets, reverse=True):
        total, done = buckets[level]
        if total == 0:
            continue
        breakdown.append({
            "importance": level,
            "total": total,
            "completed": done,
            "percentage": _round_half_up(Decimal(done) * 100 / Decimal(total)),
        })
    return breakdown


def estimated_hours(tasks: Iterable[Any]) -> dict[str, float]:
    """Total estimated hours and the share belonging to completed tasks."""
    total = ZERO
    completed = ZERO
    for task in tasks:
        hours = to_decimal(getattr(task, "estimated_hours", None))
        total += hours
        if is_done(task):
            completed += hours
    return {"total": float(total), "completed": float(completed)}


# =============================================================================
# Money
# =============================================================================

def financial_summary(
    expenses: Iterable[Any],
    incomes: Iterable[Any],
) -> FinancialTotals:
    """
    Sum incomes and expenses.

    Amounts are added across currencies without conversion.
    """
    total_expense = ZERO
    deductible = ZERO
    for expense in expenses:
        amount = to_decimal(getattr(expense, "amount", None))
        total_expense += amount
        if getattr(expense, "is_deductible", False):
            deductible += amount

    total_income = sum(
        (to_decimal(getattr(income, "amount", None)) for income in incomes),
        ZERO,
    )

    return FinancialTotals(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        deductible_expenses=deductible,
    )


def project_net_profit(budget: Any, total_expenses: Any) -> NetProfit:
    """
    Budget minus expenses, plus the share of budget spent.

    A zero or missing budget counts as 0 and reports 0% spent.
    """
    budget = to_decimal(budget)
    spent = to_decimal(total_expenses)

    if budget <= 0:
        percent = ZERO
    else:
        percent = (spent / budget * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    return NetProfit(net_profit=budget - spent, percent_spent=percent)
