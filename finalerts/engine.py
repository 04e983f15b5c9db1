"""Derive the user-facing alert list from bill, budget and goal snapshots.

Everything here is a pure function of its arguments: the caller passes `now`,
nothing reads the clock, nothing is mutated.
"""
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Union

from finalerts.domain import (
    Alert,
    AlertKind,
    BillRecord,
    BudgetRecord,
    GoalRecord,
    Severity,
)

DUE_SOON_DAYS = 3
BUDGET_WARNING_PCT = Decimal(80)
BUDGET_EXCEEDED_PCT = Decimal(100)
GOAL_COMPLETE_PCT = Decimal(100)

_ID_PREFIX = {
    AlertKind.BILL_OVERDUE: "bill-overdue",
    AlertKind.BILL_DUE_SOON: "bill-due",
    AlertKind.BUDGET_WARNING: "budget-warning",
    AlertKind.BUDGET_EXCEEDED: "budget-exceeded",
    AlertKind.GOAL_MILESTONE: "goal-complete",
}

_LINKS = {
    AlertKind.BILL_OVERDUE: "/bills",
    AlertKind.BILL_DUE_SOON: "/bills",
    AlertKind.BUDGET_WARNING: "/budgets",
    AlertKind.BUDGET_EXCEEDED: "/budgets",
    AlertKind.GOAL_MILESTONE: "/goals",
}

Number = Union[Decimal, int, float]
Moment = Union[date, datetime]


def today_of(now: Moment) -> date:
    # calendar day of `now`, time of day dropped
    if isinstance(now, datetime):
        return now.date()
    return now


def days_until_due(due_date: date, now: Moment) -> int:
    """Whole calendar days from today to `due_date`, negative when past due.

    23:59 on the day before is still one day away; this counts dates, not
    24-hour periods.
    """
    return (due_date - today_of(now)).days


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    return Decimal(str(value))


def percentage(part: Number, whole: Number) -> Decimal:
    """part / whole * 100, or 0 when whole is not a positive finite number."""
    part = _as_decimal(part)
    whole = _as_decimal(whole)
    if not whole.is_finite() or not part.is_finite() or whole <= 0:
        return Decimal(0)
    return part / whole * 100


def rounded_percent(value: Decimal) -> int:
    # to_integral_value is not bounded by the context precision, quantize is
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def alert_id(kind: AlertKind, source_id: str) -> str:
    return f"{_ID_PREFIX[kind]}-{source_id}"


def _make_alert(kind, source_id, title, message, occurred_on, severity) -> Alert:
    return Alert(
        id=alert_id(kind, source_id),
        kind=kind,
        title=title,
        message=message,
        occurred_on=occurred_on,
        severity=severity,
        source_id=source_id,
        link_hint=_LINKS[kind],
    )


def bill_alert(bill: BillRecord, now: Moment) -> Optional[Alert]:
    if bill.is_paid:
        return None

    days = days_until_due(bill.due_date, now)
    if days < 0:
        return _make_alert(
            AlertKind.BILL_OVERDUE,
            bill.id,
            "Bill Overdue",
            f"{bill.name} is overdue!",
            bill.due_date,
            Severity.ERROR,
        )

    if days > DUE_SOON_DAYS:
        return None

    if days == 0:
        title = "Bill Due Today"
        message = f"{bill.name} is due today!"
        severity = Severity.WARNING
    else:
        title = "Bill Due Soon"
        unit = "day" if days == 1 else "days"
        message = f"{bill.name} is due in {days} {unit}"
        severity = Severity.INFO
    return _make_alert(
        AlertKind.BILL_DUE_SOON, bill.id, title, message, bill.due_date, severity
    )


def budget_alert(budget: BudgetRecord, now: Moment) -> Optional[Alert]:
    pct = percentage(budget.amount_spent, budget.amount_limit)
    shown = rounded_percent(pct)

    if pct >= BUDGET_EXCEEDED_PCT:
        return _make_alert(
            AlertKind.BUDGET_EXCEEDED,
            budget.id,
            "Budget Exceeded",
            f"{budget.category_name} has gone over its limit ({shown}%)",
            today_of(now),
            Severity.ERROR,
        )
    if pct >= BUDGET_WARNING_PCT:
        return _make_alert(
            AlertKind.BUDGET_WARNING,
            budget.id,
            "Budget Warning",
            f"{budget.category_name} is close to its limit ({shown}%)",
            today_of(now),
            Severity.WARNING,
        )
    return None


def goal_alert(goal: GoalRecord, now: Moment) -> Optional[Alert]:
    # only completion is announced, partial progress never is
    if percentage(goal.current_amount, goal.target_amount) < GOAL_COMPLETE_PCT:
        return None
    return _make_alert(
        AlertKind.GOAL_MILESTONE,
        goal.id,
        "Goal Reached!",
        f"Congratulations! {goal.name} has been reached!",
        today_of(now),
        Severity.SUCCESS,
    )


def dedupe_alerts(alerts: Iterable[Alert]) -> List[Alert]:
    """Keep the first alert for every id."""
    seen = set()
    unique = []
    for a in alerts:
        if a.id in seen:
            continue
        seen.add(a.id)
        unique.append(a)
    return unique


def sort_by_severity(alerts: Iterable[Alert]) -> List[Alert]:
    # sorted() is stable: equal severities keep evaluation order
    return sorted(alerts, key=lambda a: a.severity.rank)


def derive_alerts(
    bills: Iterable[BillRecord],
    budgets: Iterable[BudgetRecord],
    goals: Iterable[GoalRecord],
    now: Moment,
) -> List[Alert]:
    """Evaluate every rule once and return the alerts, most severe first.

    Bills are evaluated first, then budgets, then goals; that order is what
    ties within one severity keep.
    """
    collected: List[Alert] = []
    for bill in bills:
        a = bill_alert(bill, now)
        if a is not None:
            collected.append(a)
    for budget in budgets:
        a = budget_alert(budget, now)
        if a is not None:
            collected.append(a)
    for goal in goals:
        a = goal_alert(goal, now)
        if a is not None:
            collected.append(a)
    return sort_by_severity(dedupe_alerts(collected))
