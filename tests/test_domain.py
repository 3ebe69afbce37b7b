from dataclasses import FrozenInstanceError
from datetime import datetime

import pytest

from budgettracker.config import Settings
from budgettracker.domain import BudgetPeriod, TransactionType, default_categories
from budgettracker.formatting import format_currency, format_month, format_percent, format_short_date
from budgettracker.periods import period_instance, same_period
from factories import make_tx


def test_signed_amount():
    expense = make_tx("t1", "food", 45.5, datetime(2024, 1, 1))
    income = make_tx("t2", "salary", 1500.0, datetime(2024, 1, 1), TransactionType.INCOME)
    assert expense.signed_amount == -45.5
    assert income.signed_amount == 1500.0


def test_records_are_immutable():
    t = make_tx("t1", "food", 1.0, datetime(2024, 1, 1))
    with pytest.raises(FrozenInstanceError):
        t.amount = 2.0


def test_default_categories_have_unique_ids_per_call():
    first, second = default_categories(), default_categories()
    assert len(first) == 8
    assert len({c.id for c in first}) == 8
    assert {c.id for c in first}.isdisjoint(c.id for c in second)
    assert all(c.icon and c.color for c in first)


def test_weekly_period_pairs_iso_week_with_calendar_year():
    # 2024-12-30 is in ISO week 1 of 2025
    assert period_instance(datetime(2024, 12, 30), BudgetPeriod.WEEKLY) == (2024, 1)
    assert not same_period(datetime(2024, 12, 30), datetime(2025, 1, 2), BudgetPeriod.WEEKLY)
    assert same_period(datetime(2024, 5, 1), datetime(2024, 5, 31), BudgetPeriod.MONTHLY)


def test_weekly_key_merges_year_end_with_first_week_of_same_year():
    year_end = datetime(2024, 12, 30)
    new_year = datetime(2024, 1, 1)
    assert period_instance(year_end, BudgetPeriod.WEEKLY) == period_instance(new_year, BudgetPeriod.WEEKLY) == (2024, 1)
    assert same_period(year_end, new_year, BudgetPeriod.WEEKLY)


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("BUDGETTRACKER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("BUDGETTRACKER_ALERT_THRESHOLD", "0.9")
    monkeypatch.setenv("BUDGETTRACKER_LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.data_dir == tmp_path
    assert settings.alert_threshold == 0.9
    assert settings.log_level == "DEBUG"


def test_settings_defaults(monkeypatch):
    for name in ("BUDGETTRACKER_DATA_DIR", "BUDGETTRACKER_ALERT_THRESHOLD", "BUDGETTRACKER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.alert_threshold == 0.8
    assert settings.log_level == "INFO"


def test_formatting():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(-3) == "-$3.00"
    assert format_short_date(datetime(2024, 3, 5)) == "03/05/24"
    assert format_month(datetime(2024, 3, 5)) == "March 2024"
    assert format_percent(0.8) == "80%"
