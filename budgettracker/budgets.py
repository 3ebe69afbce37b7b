"""Budget evaluation: which expenses count toward a budget and how far along it is."""

import math
from enum import Enum
from typing import Iterable, List

from budgettracker.domain import Budget, Transaction, TransactionType
from budgettracker.periods import same_period

WARNING_THRESHOLD = 0.8


class InvalidBudgetError(ValueError):
    """Raised when progress is requested for a budget whose limit is not a positive finite number."""


class BudgetStatus(str, Enum):
    ON_TRACK = "on_track"
    WARNING = "warning"
    OVER = "over"
    INVALID = "invalid"


def relevant_transactions(b: Budget, trans: Iterable[Transaction]) -> List[Transaction]:
    """Expenses in the budget's category that fall in its period instance."""
    return [
        t for t in trans
        if t.category_id == b.category_id
        and t.type == TransactionType.EXPENSE
        and same_period(t.date, b.start_date, b.period)
    ]


def spent(b: Budget, trans: Iterable[Transaction]) -> float:
    return sum((t.amount for t in relevant_transactions(b, trans)), 0.0)


def progress(b: Budget, trans: Iterable[Transaction]) -> float:
    """Spent / limit. Not clamped: over-budget ratios exceed 1.0."""
    if not math.isfinite(b.amount) or b.amount <= 0:
        raise InvalidBudgetError(
            f"Budget {b.id} has invalid amount {b.amount}"
        )
    return spent(b, trans) / b.amount


def remaining(b: Budget, trans: Iterable[Transaction]) -> float:
    return b.amount - spent(b, trans)


def display_progress(ratio: float) -> float:
    return min(max(ratio, 0.0), 1.0)


def budget_status(ratio: float) -> BudgetStatus:
    if ratio >= 1.0:
        return BudgetStatus.OVER
    if ratio >= WARNING_THRESHOLD:
        return BudgetStatus.WARNING
    return BudgetStatus.ON_TRACK
