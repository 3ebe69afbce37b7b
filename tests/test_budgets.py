from datetime import datetime

import pytest

from budgettracker.budgets import (
    BudgetStatus,
    InvalidBudgetError,
    budget_status,
    display_progress,
    progress,
    relevant_transactions,
    remaining,
    spent,
)
from budgettracker.domain import BudgetPeriod, TransactionType
from factories import make_budget, make_tx


def food_january():
    budget = make_budget("b1", "food", 300.0, datetime(2024, 1, 1))
    trans = (
        make_tx("t1", "food", 100.0, datetime(2024, 1, 5)),
        make_tx("t2", "food", 140.0, datetime(2024, 1, 20)),
        make_tx("t3", "food", 50.0, datetime(2024, 2, 1)),
    )
    return budget, trans


def test_monthly_budget_counts_only_its_month():
    budget, trans = food_january()
    relevant = relevant_transactions(budget, trans)
    assert [t.id for t in relevant] == ["t1", "t2"]
    assert spent(budget, trans) == 240.0
    assert progress(budget, trans) == pytest.approx(0.8)


def test_income_and_other_categories_are_ignored():
    budget, trans = food_january()
    trans = trans + (
        make_tx("t4", "food", 1000.0, datetime(2024, 1, 10), TransactionType.INCOME),
        make_tx("t5", "rent", 900.0, datetime(2024, 1, 10)),
    )
    assert spent(budget, trans) == 240.0


def test_monthly_requires_same_year():
    budget = make_budget("b1", "food", 100.0, datetime(2024, 1, 1))
    trans = (make_tx("t1", "food", 50.0, datetime(2023, 1, 15)),)
    assert relevant_transactions(budget, trans) == []


def test_weekly_budget_uses_iso_week_and_year():
    # 2024-03-11 is a Monday
    budget = make_budget("b1", "food", 100.0, datetime(2024, 3, 13), BudgetPeriod.WEEKLY)
    trans = (
        make_tx("mon", "food", 10.0, datetime(2024, 3, 11)),
        make_tx("sun", "food", 20.0, datetime(2024, 3, 17, 23, 59)),
        make_tx("next", "food", 40.0, datetime(2024, 3, 18)),
        make_tx("prev_year", "food", 80.0, datetime(2023, 3, 15)),
    )
    assert [t.id for t in relevant_transactions(budget, trans)] == ["mon", "sun"]
    assert progress(budget, trans) == pytest.approx(0.3)


def test_yearly_budget():
    budget = make_budget("b1", "food", 1000.0, datetime(2024, 6, 1), BudgetPeriod.YEARLY)
    trans = (
        make_tx("t1", "food", 100.0, datetime(2024, 1, 1)),
        make_tx("t2", "food", 100.0, datetime(2024, 12, 31)),
        make_tx("t3", "food", 100.0, datetime(2025, 1, 1)),
    )
    assert spent(budget, trans) == 200.0


def test_progress_is_not_clamped():
    budget = make_budget("b1", "food", 100.0, datetime(2024, 1, 1))
    trans = (make_tx("t1", "food", 250.0, datetime(2024, 1, 2)),)
    assert progress(budget, trans) == pytest.approx(2.5)
    assert remaining(budget, trans) == -150.0
    assert display_progress(2.5) == 1.0
    assert progress(budget, ()) == 0.0


@pytest.mark.parametrize("limit", [0.0, -10.0, float("inf"), float("nan")])
def test_invalid_limit_fails_fast(limit):
    budget = make_budget("b1", "food", limit, datetime(2024, 1, 1))
    with pytest.raises(InvalidBudgetError):
        progress(budget, ())


def test_budget_status_bands():
    assert budget_status(0.5) == BudgetStatus.ON_TRACK
    assert budget_status(0.8) == BudgetStatus.WARNING
    assert budget_status(1.0) == BudgetStatus.OVER
