import json
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from finalerts.domain import BillRecord, Transaction
from finalerts.transforms import (
    load_snapshot,
    mark_bill_paid,
    mark_bill_unpaid,
    month_bounds,
    overdue_bills,
    spent_by_category,
    total_due_this_month,
    upcoming_bills,
)

NOW = datetime(2026, 10, 17, 9, 0)
SEED = Path(__file__).resolve().parent.parent / "data" / "seed.json"


def make_bills():
    return (
        BillRecord("b1", "Electricity", date(2026, 10, 15), False, Decimal(450)),
        BillRecord("b2", "Internet", date(2026, 10, 20), False, Decimal(350)),
        BillRecord("b3", "Rent", date(2026, 11, 1), False, Decimal(3500)),
        BillRecord("b4", "Water", date(2026, 10, 10), True, Decimal(120)),
        BillRecord("b5", "Insurance", date(2027, 1, 5), False, Decimal(900)),
    )


def test_month_bounds():
    assert month_bounds(NOW) == (date(2026, 10, 1), date(2026, 10, 31))
    assert month_bounds(date(2028, 2, 10)) == (date(2028, 2, 1), date(2028, 2, 29))


def test_spent_by_category_current_month_expenses_only():
    trans = (
        Transaction("t1", "c1", Decimal(100), date(2026, 10, 1), "expense"),
        Transaction("t2", "c1", Decimal(50), date(2026, 10, 31), "expense"),
        Transaction("t3", "c1", Decimal(999), date(2026, 9, 30), "expense"),
        Transaction("t4", "c1", Decimal(999), date(2026, 10, 5), "income"),
        Transaction("t5", "c2", Decimal(20), date(2026, 10, 5), "expense"),
        Transaction("t6", None, Decimal(20), date(2026, 10, 5), "expense"),
    )
    assert spent_by_category(trans, NOW) == {"c1": Decimal(150), "c2": Decimal(20)}


def test_mark_bill_paid_is_immutable():
    bills = make_bills()
    updated = mark_bill_paid(bills, "b1")
    assert updated[0].is_paid is True
    assert bills[0].is_paid is False
    assert updated[1:] == bills[1:]
    assert mark_bill_unpaid(updated, "b1") == bills


def test_upcoming_includes_overdue_and_skips_paid():
    ids = [b.id for b in upcoming_bills(make_bills(), NOW)]
    assert ids == ["b1", "b2", "b3"]
    assert [b.id for b in upcoming_bills(make_bills(), NOW, days=2)] == ["b1"]


def test_overdue_bills():
    assert [b.id for b in overdue_bills(make_bills(), NOW)] == ["b1"]


def test_total_due_this_month():
    assert total_due_this_month(make_bills(), NOW) == Decimal(800)
    assert total_due_this_month((), NOW) == 0


def test_load_snapshot(tmp_path):
    doc = {
        "categories": [{"id": "c1", "name": "Food", "type": "expense"}],
        "transactions": [
            {"id": "t1", "category_id": "c1", "amount": 850, "date": "2026-10-03", "type": "expense"},
            {"id": "t2", "category_id": "c1", "amount": 500, "date": "2026-09-03", "type": "expense"},
        ],
        "budgets": [{"id": "u1", "category_id": "c1", "amount": 1000, "spent": 5}],
        "goals": [{"id": "g1", "name": "Car", "target_amount": 100, "current_amount": 100}],
        "bills": [
            {"id": "b1", "name": "Rent", "due_date": "2026-10-18"},
            {"id": "b2", "name": "Broken"},
        ],
    }
    path = tmp_path / "snap.json"
    path.write_text(json.dumps(doc), encoding="utf-8")

    bills, budgets, goals, errors = load_snapshot(str(path), NOW)

    assert [b.id for b in bills] == ["b1"]
    assert budgets[0].category_name == "Food"
    assert budgets[0].amount_spent == Decimal(850)
    assert goals[0].name == "Car"
    assert len(errors) == 1
    assert errors[0]["section"] == "bills"
    assert errors[0]["field"] == "due_date"


def test_load_snapshot_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_snapshot(str(tmp_path / "nope.json"), NOW)


def test_load_seed_file():
    bills, budgets, goals, errors = load_snapshot(str(SEED), NOW)
    assert len(bills) >= 3
    assert len(budgets) >= 3
    assert len(goals) >= 2
    assert errors == []
