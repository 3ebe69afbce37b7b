"""Record store: the single owner of transactions, categories and budgets.

Every mutation replaces the in-memory collection first, then persists it,
then (for transactions and budgets) runs the budget alert check. Results are
reported as Either values:

    Right(record)                         success
    Left({"error": "<validation code>"})  rejected, nothing changed
    Left({"error": "not_found"})          unknown id, nothing changed
    Left({"error": "save_failed"})        in-memory change kept, file is stale
"""

import logging
import threading
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from budgettracker import budgets as evaluator
from budgettracker.alerts import DEFAULT_THRESHOLD, BudgetAlert, check_budget_limits
from budgettracker.domain import Budget, Category, Transaction, default_categories
from budgettracker.events import BUDGET_ALERT, EventBus
from budgettracker.functional import (
    Either,
    Left,
    Maybe,
    Nothing,
    Right,
    Some,
    safe_category,
    validate_budget,
    validate_category,
    validate_transaction,
)
from budgettracker.storage import JsonStorage, StorageError, StorageKind

logger = logging.getLogger(__name__)

TRANSACTIONS = StorageKind.TRANSACTIONS
CATEGORIES = StorageKind.CATEGORIES
BUDGETS = StorageKind.BUDGETS


class Snapshot(NamedTuple):
    transactions: Tuple[Transaction, ...]
    categories: Tuple[Category, ...]
    budgets: Tuple[Budget, ...]


def _not_found(kind: StorageKind, record_id: str) -> Left:
    return Left({
        "error": "not_found",
        "message": f"No record with ID {record_id} in {kind.value}",
        "kind": kind.value,
        "id": record_id,
    })


class RecordStore:

    def __init__(
        self,
        storage: JsonStorage,
        bus: Optional[EventBus] = None,
        alert_threshold: float = DEFAULT_THRESHOLD,
    ):
        self.storage = storage
        self.events = bus if bus is not None else EventBus()
        self.alert_threshold = alert_threshold
        self._lock = threading.RLock()
        self._collections: Dict[StorageKind, tuple] = {kind: () for kind in StorageKind}
        self._opened = False

    # --- lifecycle

    def open(self) -> "RecordStore":
        with self._lock:
            for kind in StorageKind:
                self._collections[kind] = tuple(self.storage.load(kind))

            if not self._collections[CATEGORIES]:
                logger.info("No categories found, seeding defaults")
                self._collections[CATEGORIES] = default_categories()
                self._persist(CATEGORIES)

            self._opened = True
            logger.info(
                "Opened store: %d transactions, %d categories, %d budgets",
                len(self.transactions), len(self.categories), len(self.budgets),
            )
        return self

    def close(self) -> None:
        with self._lock:
            self.events.clear()
            self._collections = {kind: () for kind in StorageKind}
            self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    def __enter__(self) -> "RecordStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- queries

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._collections[TRANSACTIONS]

    @property
    def categories(self) -> Tuple[Category, ...]:
        return self._collections[CATEGORIES]

    @property
    def budgets(self) -> Tuple[Budget, ...]:
        return self._collections[BUDGETS]

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(self.transactions, self.categories, self.budgets)

    def category(self, cat_id: str) -> Maybe[Category]:
        return safe_category(self.categories, cat_id)

    def progress(self, budget_id: str) -> Maybe[float]:
        snap = self.snapshot()
        for b in snap.budgets:
            if b.id == budget_id:
                try:
                    return Some(evaluator.progress(b, snap.transactions))
                except evaluator.InvalidBudgetError as e:
                    logger.warning("No progress for budget: %s", e)
                    return Nothing()
        return Nothing()

    def check_budgets(self) -> List[BudgetAlert]:
        snap = self.snapshot()
        return check_budget_limits(snap.budgets, snap.transactions, self.events, self.alert_threshold)

    # --- transactions

    def add_transaction(self, t: Transaction) -> Either[dict, Transaction]:
        with self._lock:
            return validate_transaction(t, self.categories).bind(
                lambda valid: self._commit(TRANSACTIONS, self.transactions + (valid,), valid)
            )

    def update_transaction(self, t: Transaction) -> Either[dict, Transaction]:
        with self._lock:
            return validate_transaction(t, self.categories).bind(
                lambda valid: self._replace(TRANSACTIONS, valid)
            )

    def delete_transaction(self, transaction_id: str) -> Either[dict, Transaction]:
        with self._lock:
            return self._remove(TRANSACTIONS, transaction_id)

    # --- categories

    def add_category(self, c: Category) -> Either[dict, Category]:
        with self._lock:
            return validate_category(c).bind(
                lambda valid: self._commit(CATEGORIES, self.categories + (valid,), valid)
            )

    def update_category(self, c: Category) -> Either[dict, Category]:
        with self._lock:
            return validate_category(c).bind(lambda valid: self._replace(CATEGORIES, valid))

    def delete_category(self, cat_id: str) -> Either[dict, Category]:
        """Delete a category and every budget that targets it.

        Transactions keep their reference to the deleted category.
        """
        with self._lock:
            if self.category(cat_id).is_none():
                return _not_found(CATEGORIES, cat_id)

            dependent = [b for b in self.budgets if b.category_id == cat_id]
            if dependent:
                logger.info("Deleting %d budget(s) of category %s", len(dependent), cat_id)
            budgets_saved = self._store(
                BUDGETS, tuple(b for b in self.budgets if b.category_id != cat_id)
            )
            removed = self._remove(CATEGORIES, cat_id)
            return budgets_saved.bind(lambda _: removed)

    # --- budgets

    def add_budget(self, b: Budget) -> Either[dict, Budget]:
        with self._lock:
            return validate_budget(b, self.budgets, self.categories).bind(
                lambda valid: self._commit(BUDGETS, self.budgets + (valid,), valid)
            )

    def update_budget(self, b: Budget) -> Either[dict, Budget]:
        with self._lock:
            return validate_budget(b, self.budgets, self.categories).bind(
                lambda valid: self._replace(BUDGETS, valid)
            )

    def delete_budget(self, budget_id: str) -> Either[dict, Budget]:
        with self._lock:
            return self._remove(BUDGETS, budget_id)

    # --- internals

    def _replace(self, kind: StorageKind, record) -> Either[dict, object]:
        current = self._collections[kind]
        if not any(r.id == record.id for r in current):
            return _not_found(kind, record.id)
        updated = tuple(record if r.id == record.id else r for r in current)
        return self._commit(kind, updated, record)

    def _remove(self, kind: StorageKind, record_id: str) -> Either[dict, object]:
        current = self._collections[kind]
        removed = next((r for r in current if r.id == record_id), None)
        if removed is None:
            return _not_found(kind, record_id)
        return self._commit(kind, tuple(r for r in current if r.id != record_id), removed)

    def _commit(self, kind: StorageKind, records: tuple, result) -> Either[dict, object]:
        saved = self._store(kind, records)
        if kind in (TRANSACTIONS, BUDGETS):
            self.check_budgets()
        return saved.map(lambda _: result)

    def _store(self, kind: StorageKind, records: tuple) -> Either[dict, None]:
        self._collections[kind] = records
        return self._persist(kind)

    def _persist(self, kind: StorageKind) -> Either[dict, None]:
        try:
            self.storage.save(kind, self._collections[kind])
        except StorageError as e:
            logger.error("Save failed, in-memory %s kept: %s", kind.value, e)
            return Left({
                "error": "save_failed",
                "message": str(e),
                "kind": kind.value,
            })
        return Right(None)


def open_store(
    storage: JsonStorage,
    on_alert: Optional[Callable[[BudgetAlert], None]] = None,
    alert_threshold: float = DEFAULT_THRESHOLD,
) -> RecordStore:
    """Build and open a store, optionally wiring an alert callback."""
    store = RecordStore(storage, alert_threshold=alert_threshold)
    if on_alert is not None:
        store.events.subscribe(
            BUDGET_ALERT,
            lambda event, payload: on_alert(BudgetAlert(payload["budget"], payload["progress"])),
        )
    return store.open()
