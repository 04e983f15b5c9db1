import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from finalerts import config
from finalerts.domain import Alert
from finalerts.engine import Moment, derive_alerts

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Iterable]]


async def gather_snapshots(
    fetch_bills: Fetcher,
    fetch_budgets: Fetcher,
    fetch_goals: Fetcher,
    timeout: Optional[float] = None,
) -> Tuple[tuple, tuple, tuple, List[dict]]:
    """Fetch the three snapshots concurrently.

    Each fetcher is bounded by `timeout` seconds on its own; one that fails or
    times out yields an empty snapshot and an error entry.
    """
    async def one(name: str, fetch: Fetcher) -> Tuple[tuple, Optional[dict]]:
        try:
            records = await asyncio.wait_for(fetch(), timeout)
            return tuple(records), None
        except asyncio.TimeoutError:
            logger.error("Fetching %s timed out after %ss", name, timeout)
            return (), {"source": name, "message": f"timed out after {timeout}s"}
        except Exception as e:
            logger.error("Fetching %s failed: %s", name, e)
            return (), {"source": name, "message": str(e)}

    results = await asyncio.gather(
        one("bills", fetch_bills),
        one("budgets", fetch_budgets),
        one("goals", fetch_goals),
    )
    errors = [err for _, err in results if err is not None]
    (bills, _), (budgets, _), (goals, _) = results
    return bills, budgets, goals, errors


async def derive_when_ready(
    fetch_bills: Fetcher,
    fetch_budgets: Fetcher,
    fetch_goals: Fetcher,
    now: Moment,
    timeout: Optional[float] = None,
) -> Dict[str, object]:
    """Await all three snapshots, then run the rules once.

    `timeout` defaults to the FINALERTS_FETCH_TIMEOUT setting.
    """
    if timeout is None:
        timeout = config.fetch_timeout()
    bills, budgets, goals, errors = await gather_snapshots(
        fetch_bills, fetch_budgets, fetch_goals, timeout
    )
    alerts: List[Alert] = derive_alerts(bills, budgets, goals, now)
    return {"alerts": alerts, "errors": errors}
