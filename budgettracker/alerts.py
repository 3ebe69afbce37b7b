"""Budget alert policy.

After each mutation of transactions or budgets every budget is re-evaluated
against the full transaction set and an alert is published for each one at
or above the threshold. Alerts are not deduplicated: a budget that stays
above the threshold is reported again on every check.
"""

import logging
from typing import Iterable, List, NamedTuple

from budgettracker import budgets as evaluator
from budgettracker.domain import Budget, Transaction
from budgettracker.events import BUDGET_ALERT, EventBus

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.8


class BudgetAlert(NamedTuple):
    budget: Budget
    progress: float


def check_budget_limits(
    budgets: Iterable[Budget],
    trans: Iterable[Transaction],
    bus: EventBus,
    threshold: float = DEFAULT_THRESHOLD,
) -> List[BudgetAlert]:
    trans = tuple(trans)
    alerts = []
    for b in budgets:
        try:
            ratio = evaluator.progress(b, trans)
        except evaluator.InvalidBudgetError as e:
            logger.warning("Skipping alert check: %s", e)
            continue
        if ratio >= threshold:
            alert = BudgetAlert(budget=b, progress=ratio)
            logger.info("Budget %s at %.0f%% of limit", b.id, ratio * 100)
            bus.publish(BUDGET_ALERT, {"budget": b, "progress": ratio})
            alerts.append(alert)
    return alerts


def alert_message(alert: BudgetAlert, category_name: str) -> str:
    return (
        f"You've used {int(alert.progress * 100)}% of your {category_name} budget "
        f"for this {alert.budget.period.value.lower()} period."
    )
