"""JSON document storage for the three record collections.

Each kind lives in its own file as a JSON array. Loading never fails the
caller: a missing or unreadable document yields an empty collection. Saving
raises StorageError so the caller can report it.
"""

import json
import logging
import os
import tempfile
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Sequence, Union

from budgettracker.domain import (
    Budget,
    BudgetPeriod,
    Category,
    Color,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

Record = Union[Transaction, Category, Budget]


class StorageError(Exception):
    """Raised when a collection cannot be written."""


class StorageKind(str, Enum):
    TRANSACTIONS = "transactions"
    CATEGORIES = "categories"
    BUDGETS = "budgets"


def encode_color(c: Color) -> Dict[str, float]:
    return {"red": c.red, "green": c.green, "blue": c.blue, "opacity": c.opacity}


def decode_color(d: Dict[str, Any]) -> Color:
    return Color(
        red=float(d["red"]),
        green=float(d["green"]),
        blue=float(d["blue"]),
        opacity=float(d.get("opacity", 1.0)),
    )


def encode_category(c: Category) -> Dict[str, Any]:
    return {"id": c.id, "name": c.name, "icon": c.icon, "color": encode_color(c.color)}


def decode_category(d: Dict[str, Any]) -> Category:
    return Category(
        id=d["id"],
        name=d["name"],
        icon=d["icon"],
        color=decode_color(d["color"]),
    )


def encode_transaction(t: Transaction) -> Dict[str, Any]:
    data = {
        "id": t.id,
        "amount": t.amount,
        "title": t.title,
        "category_id": t.category_id,
        "date": t.date.isoformat(),
        "type": t.type.value,
    }
    # absent notes stay absent, empty notes are kept
    if t.notes is not None:
        data["notes"] = t.notes
    return data


def decode_transaction(d: Dict[str, Any]) -> Transaction:
    return Transaction(
        id=d["id"],
        amount=float(d["amount"]),
        title=d["title"],
        category_id=d["category_id"],
        date=datetime.fromisoformat(d["date"]),
        type=TransactionType(d["type"]),
        notes=d.get("notes"),
    )


def encode_budget(b: Budget) -> Dict[str, Any]:
    return {
        "id": b.id,
        "category_id": b.category_id,
        "amount": b.amount,
        "period": b.period.value,
        "start_date": b.start_date.isoformat(),
    }


def decode_budget(d: Dict[str, Any]) -> Budget:
    return Budget(
        id=d["id"],
        category_id=d["category_id"],
        amount=float(d["amount"]),
        period=BudgetPeriod(d["period"]),
        start_date=datetime.fromisoformat(d["start_date"]),
    )


CODECS: Dict[StorageKind, tuple[Callable[[Any], dict], Callable[[dict], Any]]] = {
    StorageKind.TRANSACTIONS: (encode_transaction, decode_transaction),
    StorageKind.CATEGORIES: (encode_category, decode_category),
    StorageKind.BUDGETS: (encode_budget, decode_budget),
}


class JsonStorage:
    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, kind: StorageKind) -> Path:
        return self.directory / f"{StorageKind(kind).value}.json"

    def load(self, kind: StorageKind) -> List[Record]:
        kind = StorageKind(kind)
        path = self.path_for(kind)
        if not path.exists():
            return []
        _, decode = CODECS[kind]
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return [decode(item) for item in data]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Could not load %s from %s, starting empty: %s", kind.value, path, e)
            return []

    def save(self, kind: StorageKind, records: Sequence[Record]) -> None:
        kind = StorageKind(kind)
        path = self.path_for(kind)
        encode, _ = CODECS[kind]
        payload = [encode(r) for r in records]
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{path.stem}-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Could not save {kind.value} to {path}: {e}") from e
