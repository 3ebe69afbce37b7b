from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from budgettracker.domain import DateRange, Transaction, TransactionType
from budgettracker.periods import in_date_range

Predicate = Callable[[Transaction], bool]


@dataclass(frozen=True)
class FilterConfig:
    query: str = ""
    type: Optional[TransactionType] = None
    category_id: Optional[str] = None
    date_range: DateRange = DateRange.THIS_MONTH


def iter_transactions(
    trans: Iterable[Transaction], pred: Predicate
) -> Iterable[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def by_query(query: str) -> Predicate:
    needle = query.casefold()

    def _filter(t: Transaction) -> bool:
        if not needle:
            return True
        if needle in t.title.casefold():
            return True
        return t.notes is not None and needle in t.notes.casefold()

    return _filter


def by_type(t_type: Optional[TransactionType]) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t_type is None or t.type == t_type

    return _filter


def by_category(cat_id: Optional[str]) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return cat_id is None or t.category_id == cat_id

    return _filter


def by_date_range(date_range: DateRange, now: datetime) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return in_date_range(t.date, date_range, now)

    return _filter


def predicates(config: FilterConfig, now: datetime) -> List[Predicate]:
    return [
        by_query(config.query),
        by_type(config.type),
        by_category(config.category_id),
        by_date_range(config.date_range, now),
    ]


def apply_filters(
    trans: Iterable[Transaction],
    config: FilterConfig,
    now: Optional[datetime] = None,
) -> List[Transaction]:
    """Transactions matching every predicate of `config`, newest first."""
    now = now or datetime.now()
    preds = predicates(config, now)
    matched = iter_transactions(trans, lambda t: all(p(t) for p in preds))
    return sorted(matched, key=lambda t: t.date, reverse=True)
