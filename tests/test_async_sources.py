import asyncio
from datetime import date, timedelta
from decimal import Decimal

import pytest

from finalerts.async_sources import derive_when_ready, gather_snapshots
from finalerts.domain import AlertKind, BillRecord, BudgetRecord, GoalRecord

TODAY = date(2026, 10, 17)


def fetcher(records, delay=0):
    async def _fetch():
        await asyncio.sleep(delay)
        return records
    return _fetch


async def failing():
    raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_gather_snapshots_collects_all_three():
    bills = [BillRecord("b1", "Rent", TODAY, False)]
    budgets = [BudgetRecord("u1", "Food", Decimal(10), Decimal(1))]
    goals = [GoalRecord("g1", "Car", Decimal(10), Decimal(1))]
    b, u, g, errors = await gather_snapshots(fetcher(bills), fetcher(budgets), fetcher(goals))
    assert b == tuple(bills)
    assert u == tuple(budgets)
    assert g == tuple(goals)
    assert errors == []


@pytest.mark.asyncio
async def test_failed_fetch_yields_empty_snapshot():
    b, u, g, errors = await gather_snapshots(fetcher([]), failing, fetcher([]))
    assert u == ()
    assert errors == [{"source": "budgets", "message": "boom"}]


@pytest.mark.asyncio
async def test_slow_fetch_times_out():
    b, u, g, errors = await gather_snapshots(fetcher([], delay=1), fetcher([]), fetcher([]), timeout=0.01)
    assert b == ()
    assert errors[0]["source"] == "bills"
    assert "timed out" in errors[0]["message"]


@pytest.mark.asyncio
async def test_fetches_run_concurrently():
    loop = asyncio.get_running_loop()
    start = loop.time()
    await gather_snapshots(fetcher([], 0.2), fetcher([], 0.2), fetcher([], 0.2))
    assert loop.time() - start < 0.5


@pytest.mark.asyncio
async def test_derive_when_ready():
    bills = [BillRecord("b1", "Rent", TODAY - timedelta(days=1), False)]
    out = await derive_when_ready(fetcher(bills), failing, fetcher([]), now=TODAY)
    assert [a.kind for a in out["alerts"]] == [AlertKind.BILL_OVERDUE]
    assert out["errors"][0]["source"] == "budgets"


def test_derive_when_ready_from_sync_code():
    out = asyncio.run(derive_when_ready(fetcher([]), fetcher([]), fetcher([]), now=TODAY))
    assert out == {"alerts": [], "errors": []}
