from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"

    @property
    def rank(self) -> int:
        # display order, lowest first
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.ERROR: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
    Severity.SUCCESS: 3,
}


class AlertKind(Enum):
    BILL_OVERDUE = "bill_overdue"
    BILL_DUE_SOON = "bill_due"
    BUDGET_WARNING = "budget_warning"
    BUDGET_EXCEEDED = "budget_exceeded"
    GOAL_MILESTONE = "goal_milestone"


@dataclass(frozen=True)
class BillRecord:
    id: str
    name: str
    due_date: date
    is_paid: bool
    amount: Decimal = Decimal(0)   # only used by the bill helpers


@dataclass(frozen=True)
class BudgetRecord:
    id: str
    category_name: str
    amount_limit: Decimal
    amount_spent: Decimal
    category_id: Optional[str] = None


@dataclass(frozen=True)
class GoalRecord:
    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    type: str   # "income" or "expense"


@dataclass(frozen=True)
class Transaction:
    id: str
    category_id: Optional[str]
    amount: Decimal     # always positive, direction is in `type`
    date: date
    type: str           # "income" or "expense"


@dataclass(frozen=True)
class Alert:
    id: str
    kind: AlertKind
    title: str
    message: str
    occurred_on: date
    severity: Severity
    source_id: str
    link_hint: Optional[str] = None

    def as_row(self) -> dict:
        """Flat dict for tables and event payloads."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "message": self.message,
            "occurred_on": self.occurred_on.isoformat(),
            "severity": self.severity.value,
            "source_id": self.source_id,
            "link_hint": self.link_hint,
        }
