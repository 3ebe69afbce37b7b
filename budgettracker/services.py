import logging
from typing import Any, Callable, Dict, Iterable, List, Sequence

from budgettracker import aggregates
from budgettracker import budgets as evaluator
from budgettracker.domain import Category, Transaction
from budgettracker.store import Snapshot

logger = logging.getLogger(__name__)

Aggregator = Callable[[Sequence[Transaction], Sequence[Category], Dict[str, Any]], Dict[str, Any]]


class BudgetService:
    """Per-budget progress rows for the dashboard and budget screens."""

    def overview(self, snapshot: Snapshot) -> List[Dict[str, Any]]:
        rows = []
        for b in snapshot.budgets:
            used = evaluator.spent(b, snapshot.transactions)
            try:
                ratio = evaluator.progress(b, snapshot.transactions)
                status = evaluator.budget_status(ratio)
            except evaluator.InvalidBudgetError as e:
                logger.warning("Showing budget as invalid: %s", e)
                ratio, status = 0.0, evaluator.BudgetStatus.INVALID
            rows.append({
                "budget": b,
                "category": aggregates.category_name(snapshot.categories, b.category_id),
                "period": b.period.value,
                "limit": b.amount,
                "spent": used,
                "remaining": b.amount - used,
                "progress": ratio,
                "display_progress": evaluator.display_progress(ratio),
                "status": status,
            })
        return rows


def totals_aggregator(trans, cats, acc=None) -> Dict[str, Any]:
    return {
        "income": aggregates.total_income(trans),
        "expenses": aggregates.total_expenses(trans),
        "balance": aggregates.balance(trans),
    }


def breakdown_aggregator(trans, cats, acc=None) -> Dict[str, Any]:
    return {
        "breakdown": [
            {
                "category_id": cat_id,
                "category": aggregates.category_name(cats, cat_id),
                "total": total,
                "share": share,
            }
            for cat_id, total, share in aggregates.category_shares(trans)
        ]
    }


def count_aggregator(trans, cats, acc=None) -> Dict[str, Any]:
    return {"count": len(trans)}


DEFAULT_AGGREGATORS = (totals_aggregator, breakdown_aggregator, count_aggregator)


class ReportService:
    """Runs injected aggregators in order and merges their partial results."""

    def __init__(self, aggregators: Sequence[Aggregator] = DEFAULT_AGGREGATORS):
        self.aggregators = aggregators

    def summary(self, transactions: Iterable[Transaction], categories: Iterable[Category]) -> Dict[str, Any]:
        trans = tuple(transactions)
        cats = tuple(categories)
        report = {"steps": [], "result": {}}
        acc: Dict[str, Any] = {}
        for agg in self.aggregators:
            out = agg(trans, cats, acc)
            report["steps"].append({"aggregator": getattr(agg, "__name__", str(agg)), "output": out})
            if isinstance(out, dict):
                acc.update(out)
        report["result"] = acc
        return report
