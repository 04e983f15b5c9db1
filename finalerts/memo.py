from datetime import date
from functools import lru_cache

from finalerts.domain import Alert, BillRecord, BudgetRecord, GoalRecord
from finalerts.engine import derive_alerts


@lru_cache(maxsize=64)
def cached_alerts(
    bills: tuple[BillRecord, ...],
    budgets: tuple[BudgetRecord, ...],
    goals: tuple[GoalRecord, ...],
    today: date,
) -> tuple[Alert, ...]:
    # keyed by calendar day: the rules never look at the time of day
    return tuple(derive_alerts(bills, budgets, goals, today))
