"""
Derived Metrics Tests
=====================

Progress, timing, importance breakdown, hours and money figures, using
plain stand-ins for tasks and finance entries.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from deskflow.core import metrics
from deskflow.core.metrics import TimingStatus

NOW = datetime(2026, 3, 15, 10, 0, tzinfo=timezone.utc)

DONE = 4
IN_PROGRESS = 2


def _task(
    status_id: int = IN_PROGRESS,
    importance=3,
    due_date=None,
    completed_at=None,
    estimated_hours=None,
):
    return SimpleNamespace(
        status_id=status_id,
        importance=importance,
        due_date=due_date,
        completed_at=completed_at,
        estimated_hours=estimated_hours,
    )


def _entry(amount, is_deductible=False):
    return SimpleNamespace(amount=Decimal(amount), is_deductible=is_deductible)


class TestWeightedProgress:
    def test_empty_is_zero(self):
        assert metrics.weighted_progress([]) == 0

    def test_weights_by_importance(self):
        tasks = [_task(DONE, importance=5), _task(IN_PROGRESS, importance=1)]
        # 5 / 6 = 83.33
        assert metrics.weighted_progress(tasks) == 83

    def test_missing_importance_weighs_one(self):
        tasks = [_task(DONE, importance=None), _task(IN_PROGRESS, importance=1)]
        assert metrics.weighted_progress(tasks) == 50

    def test_rounds_half_up(self):
        # 1 / 8 = 12.5
        tasks = [_task(DONE, importance=1), _task(IN_PROGRESS, importance=7)]
        assert metrics.weighted_progress(tasks) == 13

    def test_all_done_is_hundred(self):
        assert metrics.weighted_progress([_task(DONE), _task(DONE, importance=2)]) == 100


class TestClassifyTiming:
    def test_empty_is_on_time(self):
        assert metrics.classify_timing([], NOW) == TimingStatus.ON_TIME

    def test_incomplete_past_due_is_late(self):
        tasks = [_task(DONE), _task(IN_PROGRESS, due_date=date(2026, 3, 14))]
        assert metrics.classify_timing(tasks, NOW) == TimingStatus.LATE

    def test_due_today_is_not_late(self):
        tasks = [_task(IN_PROGRESS, due_date=date(2026, 3, 15))]
        assert metrics.classify_timing(tasks, NOW) == TimingStatus.ON_TIME

    def test_late_wins_over_everything(self):
        tasks = [
            _task(DONE, due_date=date(2026, 3, 20), completed_at=datetime(2026, 3, 1)),
            _task(IN_PROGRESS, due_date=date(2026, 1, 1)),
        ]
        assert metrics.classify_timing(tasks, NOW) == TimingStatus.LATE

    def test_partially_done_is_on_time(self):
        tasks = [_task(DONE), _task(IN_PROGRESS, due_date=date(2026, 4, 1))]
        assert metrics.classify_timing(tasks, NOW) == TimingStatus.ON_TIME

    def test_all_done_before_due_is_early(self):
        tasks = [
            _task(DONE, due_date=date(2026, 3, 20), completed_at=datetime(2026, 3, 10)),
            _task(DONE, due_date=None, completed_at=datetime(2026, 3, 11)),
        ]
        assert metrics.classify_timing(tasks, NOW) == TimingStatus.EARLY

    def test_completed_on_due_date_is_on_time(self):
        tasks = [
            _task(DONE, due_date=date(2026, 3, 10), completed_at=datetime(2026, 3, 10, 18)),
        ]
        assert metrics.classify_timing(tasks, NOW) == TimingStatus.ON_TIME

    def test_done_past_due_is_not_late(self):
        tasks = [
            _task(DONE, due_date=date(2026, 3, 1), completed_at=datetime(2026, 2, 20)),
        ]
        assert metrics.classify_timing(tasks, NOW) == TimingStatus.EARLY


class TestBreakdownAndHours:
    def test_breakdown_skips_empty_levels(self):
        tasks = [_task(DONE, importance=5), _task(IN_PROGRESS, importance=5), _task(DONE, importance=2)]
        assert metrics.importance_breakdown(tasks) == [
            {"importance": 5, "total": 2, "completed": 1, "percentage": 50},
            {"importance": 2, "total": 1, "completed": 1, "percentage": 100},
        ]

    def test_estimated_hours(self):
        tasks = [
            _task(DONE, estimated_hours=Decimal("2.5")),
            _task(IN_PROGRESS, estimated_hours=Decimal("4")),
            _task(IN_PROGRESS),
        ]
        assert metrics.estimated_hours(tasks) == {"total": 6.5, "completed": 2.5}


class TestMoney:
    def test_financial_summary(self):
        totals = metrics.financial_summary(
            [_entry("100.00", is_deductible=True), _entry("50.50")],
            [_entry("400.00"), _entry("25.25")],
        )
        assert totals.total_income == Decimal("425.25")
        assert totals.total_expense == Decimal("150.50")
        assert totals.balance == Decimal("274.75")
        assert totals.deductible_expenses == Decimal("100.00")

    def test_financial_summary_empty(self):
        assert metrics.financial_summary([], []).to_dict() == {
            "totalIncome": 0.0,
            "totalExpense": 0.0,
            "balance": 0.0,
            "deductibleExpenses": 0.0,
        }

    def test_net_profit(self):
        result = metrics.project_net_profit(Decimal("1000"), Decimal("250"))
        assert result.net_profit == Decimal("750")
        assert result.percent_spent == Decimal("25.00")

    @pytest.mark.parametrize("budget", [None, Decimal("0")])
    def test_net_profit_without_budget(self, budget):
        result = metrics.project_net_profit(budget, Decimal("120"))
        assert result.net_profit == Decimal("-120")
        assert result.percent_spent == 0

    def test_overspent_project(self):
        result = metrics.project_net_profit(Decimal("300"), Decimal("450"))
        assert result.to_dict() == {"netProfit": -150.0, "percentSpent": 150.0}
