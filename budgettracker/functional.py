import math
from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterable, TypeVar

from budgettracker.domain import Budget, Category, Transaction
from budgettracker.periods import same_period

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_category(cats: Iterable[Category], cat_id: str) -> Maybe[Category]:
    for cat in cats:
        if cat.id == cat_id:
            return Some(cat)
    return Nothing()


def parse_amount(text: str) -> Either[dict, float]:
    """Parse user-entered money, accepting a comma as decimal separator."""
    try:
        value = float(str(text).strip().replace(",", "."))
        if not math.isfinite(value):
            raise ValueError(f"non-finite amount {value}")
    except ValueError:
        return Left({
            "error": "invalid_amount",
            "message": "Please enter a valid amount.",
            "input": text,
        })
    return Right(value)


def _positive_amount(amount: float) -> Either[dict, float]:
    if not math.isfinite(amount):
        return Left({
            "error": "invalid_amount",
            "message": "Please enter a valid amount.",
            "amount": amount,
        })
    if amount <= 0:
        return Left({
            "error": "non_positive_amount",
            "message": "Amount must be greater than zero.",
            "amount": amount,
        })
    return Right(amount)


def _known_category(cats: Iterable[Category], cat_id: str) -> Either[dict, Category]:
    found = safe_category(cats, cat_id)
    if found.is_none():
        return Left({
            "error": "category_not_found",
            "message": "Please select a category.",
            "category_id": cat_id,
        })
    return Right(found.get_or_else(None))


def validate_transaction(
    t: Transaction,
    cats: Iterable[Category],
) -> Either[dict, Transaction]:
    if not t.title.strip():
        return Left({
            "error": "empty_title",
            "message": "Please enter a title.",
        })

    return (
        _positive_amount(t.amount)
        .bind(lambda _: _known_category(cats, t.category_id))
        .map(lambda _: t)
    )


def validate_category(c: Category) -> Either[dict, Category]:
    if not c.name.strip():
        return Left({
            "error": "empty_name",
            "message": "Please enter a category name.",
        })
    return Right(c)


def validate_budget(
    b: Budget,
    budgets: Iterable[Budget],
    cats: Iterable[Category],
) -> Either[dict, Budget]:
    checked = _known_category(cats, b.category_id).bind(lambda _: _positive_amount(b.amount))
    if checked.is_left():
        return checked

    clash = next(
        (
            other for other in budgets
            if other.id != b.id
            and other.category_id == b.category_id
            and other.period == b.period
            and same_period(other.start_date, b.start_date, b.period)
        ),
        None,
    )
    if clash is not None:
        return Left({
            "error": "duplicate_budget",
            "message": "A budget for this category and period already exists.",
            "category_id": b.category_id,
            "existing_budget_id": clash.id,
        })

    return Right(b)
