import calendar
import json
import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from finalerts.domain import BillRecord, BudgetRecord, GoalRecord, Transaction
from finalerts.engine import Moment, today_of
from finalerts.functional import (
    parse_bill,
    parse_budget,
    parse_category,
    parse_goal,
    parse_transaction,
)

logger = logging.getLogger(__name__)


def month_bounds(now: Moment) -> Tuple[date, date]:
    today = today_of(now)
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def _collect(rows, parser, section: str, errors: List[dict]) -> tuple:
    records = []
    for row in rows:
        result = parser(row)
        if result.is_right():
            records.append(result.get_or_else(None))
        else:
            err = dict(result.get_error(), section=section)
            logger.warning("Skipping %s row: %s", section, err["message"])
            errors.append(err)
    return tuple(records)


def load_snapshot(
    path: str, now: Moment
) -> Tuple[
    Tuple[BillRecord, ...],
    Tuple[BudgetRecord, ...],
    Tuple[GoalRecord, ...],
    List[dict],
]:
    """Read bills, budgets and goals from a JSON document.

    Budget spending is recomputed from the document's expense transactions
    for the month of `now`. Rows that fail validation are left out and
    reported in the returned error list.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    errors: List[dict] = []
    categories = _collect(data.get("categories", []), parse_category, "categories", errors)
    transactions = _collect(data.get("transactions", []), parse_transaction, "transactions", errors)
    spent = spent_by_category(transactions, now)

    bills = _collect(data.get("bills", []), parse_bill, "bills", errors)
    budgets = _collect(
        data.get("budgets", []),
        lambda row: parse_budget(
            row, categories, spent.get(row.get("category_id"), Decimal(0))
        ),
        "budgets",
        errors,
    )
    goals = _collect(data.get("goals", []), parse_goal, "goals", errors)

    logger.debug(
        "Loaded %d bills, %d budgets, %d goals from %s",
        len(bills), len(budgets), len(goals), path,
    )
    return bills, budgets, goals, errors


def spent_by_category(trans: Iterable[Transaction], now: Moment) -> Dict[str, Decimal]:
    start, end = month_bounds(now)
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for t in trans:
        if t.type != "expense" or not t.category_id:
            continue
        if start <= t.date <= end:
            totals[t.category_id] += abs(t.amount)
    return dict(totals)


def _set_paid(bills: Iterable[BillRecord], bill_id: str, paid: bool) -> Tuple[BillRecord, ...]:
    return tuple(
        BillRecord(
            id=b.id,
            name=b.name,
            due_date=b.due_date,
            is_paid=paid if b.id == bill_id else b.is_paid,
            amount=b.amount,
        )
        for b in bills
    )


def mark_bill_paid(bills: Iterable[BillRecord], bill_id: str) -> Tuple[BillRecord, ...]:
    return _set_paid(bills, bill_id, True)


def mark_bill_unpaid(bills: Iterable[BillRecord], bill_id: str) -> Tuple[BillRecord, ...]:
    return _set_paid(bills, bill_id, False)


def upcoming_bills(
    bills: Iterable[BillRecord], now: Moment, days: int = 30
) -> Tuple[BillRecord, ...]:
    # overdue bills count as upcoming too
    horizon = today_of(now) + timedelta(days=days)
    return tuple(b for b in bills if not b.is_paid and b.due_date <= horizon)


def overdue_bills(bills: Iterable[BillRecord], now: Moment) -> Tuple[BillRecord, ...]:
    today = today_of(now)
    return tuple(b for b in bills if not b.is_paid and b.due_date < today)


def total_due_this_month(bills: Iterable[BillRecord], now: Moment) -> Decimal:
    start, end = month_bounds(now)
    return sum(
        (b.amount for b in bills if not b.is_paid and start <= b.due_date <= end),
        Decimal(0),
    )
