from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from finalerts.domain import BillRecord, BudgetRecord, Category, GoalRecord, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

FALLBACK_CATEGORY_NAME = "Category"


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

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


def safe_category(cats: Iterable[Category], cat_id: Optional[str]) -> Maybe[Category]:
    for cat in cats:
        if cat.id == cat_id:
            return Some(cat)
    return Nothing()


# --- row validators: raw collaborator dicts -> records

def _missing(field: str, row: Mapping[str, Any]) -> Left:
    return Left({
        "error": "missing_field",
        "message": f"Field '{field}' is required",
        "field": field,
        "row": dict(row),
    })


def _require(row: Mapping[str, Any], field: str) -> Either[dict, Any]:
    value = row.get(field)
    if value is None or value == "":
        return _missing(field, row)
    return Right(value)


def parse_date(value: Any, field: str = "date") -> Either[dict, date]:
    if isinstance(value, datetime):
        return Right(value.date())
    if isinstance(value, date):
        return Right(value)
    try:
        # accepts "2025-09-01" and "2025-09-01T10:00:00"
        return Right(date.fromisoformat(str(value)[:10]))
    except ValueError:
        return Left({
            "error": "invalid_date",
            "message": f"Field '{field}' is not an ISO date: {value!r}",
            "field": field,
        })


def parse_amount(value: Any, field: str = "amount") -> Either[dict, Decimal]:
    if isinstance(value, bool):
        return Left({
            "error": "invalid_amount",
            "message": f"Field '{field}' must be a number, got a boolean",
            "field": field,
        })
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        return Left({
            "error": "invalid_amount",
            "message": f"Field '{field}' is not a number: {value!r}",
            "field": field,
        })
    if not amount.is_finite():
        return Left({
            "error": "invalid_amount",
            "message": f"Field '{field}' must be finite: {value!r}",
            "field": field,
        })
    return Right(amount)


def parse_bill(row: Mapping[str, Any]) -> Either[dict, BillRecord]:
    return _require(row, "id").bind(
        lambda bid: _require(row, "name").bind(
            lambda name: _require(row, "due_date").bind(lambda v: parse_date(v, "due_date")).bind(
                lambda due: parse_amount(row.get("amount", 0)).map(
                    lambda amount: BillRecord(
                        id=str(bid),
                        name=str(name),
                        due_date=due,
                        is_paid=bool(row.get("is_paid", False)),
                        amount=amount,
                    )
                )
            )
        )
    )


def _budget_category_name(row: Mapping[str, Any], cats: Iterable[Category]) -> str:
    if row.get("category_name"):
        return str(row["category_name"])
    joined = row.get("category")
    if isinstance(joined, Mapping) and joined.get("name"):
        return str(joined["name"])
    return (
        safe_category(cats, row.get("category_id"))
        .map(lambda c: c.name)
        .get_or_else(FALLBACK_CATEGORY_NAME)
    )


def parse_budget(
    row: Mapping[str, Any],
    cats: Iterable[Category] = (),
    spent: Optional[Decimal] = None,
) -> Either[dict, BudgetRecord]:
    """Build a budget record; `spent` overrides whatever the row carries."""
    limit_raw = row.get("amount_limit", row.get("amount"))
    if limit_raw is None:
        return _missing("amount", row)
    spent_raw = spent if spent is not None else row.get("amount_spent", row.get("spent", 0))

    return _require(row, "id").bind(
        lambda bid: parse_amount(limit_raw, "amount").bind(
            lambda limit: parse_amount(spent_raw, "spent").map(
                lambda spent_amount: BudgetRecord(
                    id=str(bid),
                    category_name=_budget_category_name(row, cats),
                    amount_limit=limit,
                    amount_spent=spent_amount,
                    category_id=row.get("category_id"),
                )
            )
        )
    )


def parse_goal(row: Mapping[str, Any]) -> Either[dict, GoalRecord]:
    return _require(row, "id").bind(
        lambda gid: _require(row, "name").bind(
            lambda name: _require(row, "target_amount").bind(
                lambda t: parse_amount(t, "target_amount")
            ).bind(
                lambda target: parse_amount(row.get("current_amount", 0), "current_amount").map(
                    lambda current: GoalRecord(
                        id=str(gid),
                        name=str(name),
                        target_amount=target,
                        current_amount=current,
                    )
                )
            )
        )
    )


def parse_category(row: Mapping[str, Any]) -> Either[dict, Category]:
    return _require(row, "id").bind(
        lambda cid: _require(row, "name").map(
            lambda name: Category(id=str(cid), name=str(name), type=str(row.get("type", "expense")))
        )
    )


def parse_transaction(row: Mapping[str, Any]) -> Either[dict, Transaction]:
    kind = row.get("type")
    if kind not in ("income", "expense"):
        return Left({
            "error": "invalid_type",
            "message": f"Transaction type must be 'income' or 'expense', got {kind!r}",
            "field": "type",
            "row": dict(row),
        })
    return _require(row, "id").bind(
        lambda tid: _require(row, "amount").bind(parse_amount).bind(
            lambda amount: _require(row, "date").bind(parse_date).map(
                lambda day: Transaction(
                    id=str(tid),
                    category_id=row.get("category_id"),
                    amount=abs(amount),
                    date=day,
                    type=kind,
                )
            )
        )
    )
