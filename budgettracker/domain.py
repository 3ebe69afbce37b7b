from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4


def new_id() -> str:
    return str(uuid4())


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class BudgetPeriod(str, Enum):
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


class DateRange(str, Enum):
    TODAY = "Today"
    THIS_WEEK = "This Week"
    THIS_MONTH = "This Month"
    LAST_3_MONTHS = "Last 3 Months"
    THIS_YEAR = "This Year"
    ALL_TIME = "All Time"


@dataclass(frozen=True)
class Color:
    red: float       # 0..1
    green: float
    blue: float
    opacity: float = 1.0

    def to_hex(self) -> str:
        return "#{:02X}{:02X}{:02X}".format(
            round(self.red * 255), round(self.green * 255), round(self.blue * 255)
        )


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    icon: str        # symbol name, e.g. "cart.fill"
    color: Color


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float            # magnitude, sign comes from type
    title: str
    category_id: str
    date: datetime
    type: TransactionType
    notes: Optional[str] = None

    @property
    def signed_amount(self) -> float:
        return -self.amount if self.type == TransactionType.EXPENSE else self.amount


# A budget (limit for a category over one period instance)
@dataclass(frozen=True)
class Budget:
    id: str
    category_id: str
    amount: float
    period: BudgetPeriod
    start_date: datetime


_DEFAULT_CATEGORIES = (
    ("Food", "cart.fill", Color(1.0, 0.231, 0.188)),
    ("Transport", "car.fill", Color(0.0, 0.478, 1.0)),
    ("Housing", "house.fill", Color(0.204, 0.78, 0.349)),
    ("Entertainment", "film.fill", Color(0.686, 0.322, 0.871)),
    ("Utilities", "bolt.fill", Color(1.0, 0.584, 0.0)),
    ("Income", "dollarsign.circle.fill", Color(0.0, 0.78, 0.745)),
    ("Health", "heart.fill", Color(1.0, 0.176, 0.333)),
    ("Education", "book.fill", Color(0.196, 0.678, 0.902)),
)


def default_categories() -> tuple[Category, ...]:
    """Built-in categories seeded on first run. Each call returns fresh ids."""
    return tuple(
        Category(id=new_id(), name=name, icon=icon, color=color)
        for name, icon, color in _DEFAULT_CATEGORIES
    )
