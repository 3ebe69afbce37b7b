from datetime import datetime, timedelta
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

from budgettracker.domain import BudgetPeriod, DateRange


def period_instance(d: datetime, period: BudgetPeriod) -> Tuple[int, ...]:
    """Key identifying the concrete period occurrence that contains `d`.

    Weekly keys pair the ISO week number with the calendar year, so the
    days of ISO week 1 that fall in late December belong to the old year.
    """
    if period == BudgetPeriod.MONTHLY:
        return (d.year, d.month)
    if period == BudgetPeriod.WEEKLY:
        return (d.year, d.isocalendar()[1])
    if period == BudgetPeriod.YEARLY:
        return (d.year,)
    raise ValueError(f"Unknown budget period: {period!r}")


def same_period(a: datetime, b: datetime, period: BudgetPeriod) -> bool:
    return period_instance(a, period) == period_instance(b, period)


def start_of_day(d: datetime) -> datetime:
    return d.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(d: datetime) -> datetime:
    # ISO weeks start on Monday
    return start_of_day(d) - timedelta(days=d.weekday())


def start_of_month(d: datetime) -> datetime:
    return start_of_day(d).replace(day=1)


def date_range_bounds(
    date_range: DateRange, now: datetime
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Return (start inclusive, end exclusive); None means unbounded."""
    if date_range == DateRange.TODAY:
        start = start_of_day(now)
        return start, start + timedelta(days=1)
    if date_range == DateRange.THIS_WEEK:
        start = start_of_week(now)
        return start, start + timedelta(days=7)
    if date_range == DateRange.THIS_MONTH:
        start = start_of_month(now)
        return start, start + relativedelta(months=1)
    if date_range == DateRange.LAST_3_MONTHS:
        return now - relativedelta(months=3), None
    if date_range == DateRange.THIS_YEAR:
        start = start_of_month(now).replace(month=1)
        return start, start + relativedelta(years=1)
    if date_range == DateRange.ALL_TIME:
        return None, None
    raise ValueError(f"Unknown date range: {date_range!r}")


def in_date_range(d: datetime, date_range: DateRange, now: datetime) -> bool:
    start, end = date_range_bounds(date_range, now)
    if start is not None and d < start:
        return False
    if end is not None and d >= end:
        return False
    return True
