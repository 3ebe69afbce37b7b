from functools import reduce
from typing import Dict, Iterable, Iterator, List, Tuple

from budgettracker.domain import Category, Transaction, TransactionType
from budgettracker.functional import safe_category

UNCATEGORIZED = "Uncategorized"


def _total_of(trans: Iterable[Transaction], t_type: TransactionType) -> float:
    return reduce(
        lambda acc, t: acc + t.amount if t.type == t_type else acc, trans, 0.0
    )


def total_income(trans: Iterable[Transaction]) -> float:
    return _total_of(trans, TransactionType.INCOME)


def total_expenses(trans: Iterable[Transaction]) -> float:
    return _total_of(trans, TransactionType.EXPENSE)


def balance(trans: Iterable[Transaction]) -> float:
    trans = tuple(trans)
    return total_income(trans) - total_expenses(trans)


def expense_transactions(trans: Iterable[Transaction]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == TransactionType.EXPENSE, trans))


def group_by_category(trans: Iterable[Transaction]) -> Dict[str, List[Transaction]]:
    """Expense transactions keyed by category id, in first-seen order."""
    groups: Dict[str, List[Transaction]] = {}
    for t in expense_transactions(trans):
        groups.setdefault(t.category_id, []).append(t)
    return groups


def category_spending(trans: Iterable[Transaction]) -> List[Tuple[str, float]]:
    totals = [
        (cat_id, sum((t.amount for t in group), 0.0))
        for cat_id, group in group_by_category(trans).items()
    ]
    # sorted() is stable, ties keep first-seen order
    return sorted(totals, key=lambda item: item[1], reverse=True)


def category_shares(trans: Iterable[Transaction]) -> List[Tuple[str, float, float]]:
    spending = category_spending(trans)
    overall = sum(total for _, total in spending)
    return [
        (cat_id, total, total / overall if overall else 0.0)
        for cat_id, total in spending
    ]


def category_name(cats: Iterable[Category], cat_id: str) -> str:
    return safe_category(cats, cat_id).map(lambda c: c.name).get_or_else(UNCATEGORIZED)


def top_categories(
    trans: Iterable[Transaction], cats: Tuple[Category, ...], k: int
) -> Iterator[Tuple[str, float]]:
    for cat_id, total in category_spending(trans)[: max(0, k)]:
        yield category_name(cats, cat_id), total
