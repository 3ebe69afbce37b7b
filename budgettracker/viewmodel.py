from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from budgettracker import aggregates
from budgettracker.domain import DateRange, Transaction, TransactionType
from budgettracker.filters import FilterConfig, apply_filters
from budgettracker.functional import Either
from budgettracker.store import RecordStore


class TransactionView:
    """Filter state plus derived transaction views over a RecordStore.

    Nothing is cached: every read re-filters the store's current snapshot,
    so views are fresh after any mutation or filter change.
    """

    def __init__(
        self,
        store: RecordStore,
        config: FilterConfig = FilterConfig(),
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.config = config
        self.clock = clock

    # filter configuration

    def set_query(self, query: str) -> None:
        self.config = replace(self.config, query=query)

    def set_type(self, t_type: Optional[TransactionType]) -> None:
        self.config = replace(self.config, type=t_type)

    def set_category(self, cat_id: Optional[str]) -> None:
        self.config = replace(self.config, category_id=cat_id)

    def set_date_range(self, date_range: DateRange) -> None:
        self.config = replace(self.config, date_range=date_range)

    def reset(self) -> None:
        self.config = FilterConfig()

    # derived views

    @property
    def filtered(self) -> List[Transaction]:
        return apply_filters(self.store.snapshot().transactions, self.config, self.clock())

    def _subject(self, trans: Optional[Sequence[Transaction]]) -> Sequence[Transaction]:
        return self.filtered if trans is None else trans

    def total_income(self, trans: Optional[Sequence[Transaction]] = None) -> float:
        return aggregates.total_income(self._subject(trans))

    def total_expenses(self, trans: Optional[Sequence[Transaction]] = None) -> float:
        return aggregates.total_expenses(self._subject(trans))

    def balance(self, trans: Optional[Sequence[Transaction]] = None) -> float:
        return aggregates.balance(self._subject(trans))

    def group_by_category(self) -> Dict[str, List[Transaction]]:
        return aggregates.group_by_category(self.filtered)

    def category_spending(self) -> List[Tuple[str, float]]:
        return aggregates.category_spending(self.filtered)

    def recent(self, n: int = 5) -> List[Transaction]:
        return self.filtered[: max(0, n)]

    # mutations go straight to the store

    def add(self, t: Transaction) -> Either[dict, Transaction]:
        return self.store.add_transaction(t)

    def update(self, t: Transaction) -> Either[dict, Transaction]:
        return self.store.update_transaction(t)

    def delete(self, transaction_id: str) -> Either[dict, Transaction]:
        return self.store.delete_transaction(transaction_id)
