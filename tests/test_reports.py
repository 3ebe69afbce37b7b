from datetime import datetime

import pytest

from budgettracker.budgets import BudgetStatus
from budgettracker.domain import TransactionType
from budgettracker.reports import monthly_totals, spending_trend, transactions_frame
from budgettracker.services import BudgetService, ReportService
from budgettracker.store import Snapshot
from factories import make_budget, make_cat, make_tx

INCOME = TransactionType.INCOME


def make_sample():
    cats = (make_cat("food", "Food"), make_cat("rent", "Housing"), make_cat("salary", "Income"))
    trans = (
        make_tx("t1", "food", 10.0, datetime(2024, 1, 5, 9, 0)),
        make_tx("t2", "food", 15.0, datetime(2024, 1, 5, 18, 0)),
        make_tx("t3", "rent", 75.0, datetime(2024, 1, 7)),
        make_tx("t4", "salary", 500.0, datetime(2024, 1, 1), INCOME),
        make_tx("t5", "food", 20.0, datetime(2024, 2, 3), notes=""),
    )
    return cats, trans


def test_transactions_frame_resolves_category_names():
    cats, trans = make_sample()
    df = transactions_frame(trans + (make_tx("t6", "gone", 1.0, datetime(2024, 3, 1)),), cats)
    assert list(df["category"]) == ["Food", "Food", "Housing", "Income", "Food", "Uncategorized"]
    assert df.loc[df["id"] == "t4", "signed_amount"].item() == 500.0
    assert df.loc[df["id"] == "t3", "signed_amount"].item() == -75.0


def test_transactions_frame_empty():
    df = transactions_frame(())
    assert df.empty
    assert "amount" in df.columns


def test_spending_trend_groups_expenses_by_day():
    _, trans = make_sample()
    trend = spending_trend(trans)
    assert [d.strftime("%Y-%m-%d") for d in trend.index] == ["2024-01-05", "2024-01-07", "2024-02-03"]
    assert list(trend.values) == [25.0, 75.0, 20.0]
    assert spending_trend(()).empty


def test_monthly_totals():
    _, trans = make_sample()
    table = monthly_totals(trans)
    assert list(table.index) == ["2024-01", "2024-02"]
    assert table.loc["2024-01", "Income"] == 500.0
    assert table.loc["2024-01", "Expense"] == 100.0
    assert table.loc["2024-02", "Income"] == 0.0


def test_budget_overview_rows():
    cats, trans = make_sample()
    budgets = (
        make_budget("b1", "food", 30.0, datetime(2024, 1, 1)),
        make_budget("b2", "rent", 50.0, datetime(2024, 1, 1)),
    )
    rows = BudgetService().overview(Snapshot(trans, cats, budgets))

    food, rent = rows
    assert food["category"] == "Food"
    assert food["spent"] == 25.0
    assert food["remaining"] == 5.0
    assert food["status"] == BudgetStatus.WARNING
    assert rent["progress"] == pytest.approx(1.5)
    assert rent["display_progress"] == 1.0
    assert rent["status"] == BudgetStatus.OVER


def test_report_summary_merges_aggregators():
    cats, trans = make_sample()
    report = ReportService().summary(trans, cats)
    result = report["result"]

    assert [s["aggregator"] for s in report["steps"]] == [
        "totals_aggregator", "breakdown_aggregator", "count_aggregator",
    ]
    assert result["income"] == 500.0
    assert result["expenses"] == 120.0
    assert result["balance"] == 380.0
    assert result["count"] == 5
    assert [row["category"] for row in result["breakdown"]] == ["Housing", "Food"]
    assert result["breakdown"][0]["share"] == pytest.approx(75 / 120)


def test_report_service_with_custom_aggregator():
    def largest(trans, cats, acc):
        return {"largest": max(t.amount for t in trans), "seen_income": acc.get("income")}

    from budgettracker.services import totals_aggregator

    cats, trans = make_sample()
    result = ReportService([totals_aggregator, largest]).summary(trans, cats)["result"]
    assert result["largest"] == 500.0
    assert result["seen_income"] == 500.0
