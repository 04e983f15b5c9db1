import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from finalerts.domain import Alert, Severity
from finalerts.engine import Moment, derive_alerts, today_of
from finalerts.events import ALERTS_DERIVED, SOURCE_FAILED, EventBus, event_bus
from finalerts.memo import cached_alerts

logger = logging.getLogger(__name__)

Source = Callable[[], Iterable]


def summarize(alerts: Sequence[Alert]) -> Dict[str, Any]:
    by_severity = {s.value: 0 for s in Severity}
    for a in alerts:
        by_severity[a.severity.value] += 1
    return {"unread_count": len(alerts), "by_severity": by_severity}


class AlertService:
    """Facade that pulls the three snapshots and runs the alert rules over them.

    bill_source, budget_source, goal_source: zero-argument callables returning
    the current records. A source that raises is logged, treated as empty and
    reported under "errors" in the feed.
    clock: used for `now` when refresh() is not given one.
    cached: evaluate through memo.cached_alerts, for callers that refresh
    repeatedly with unchanged snapshots.
    """

    def __init__(
        self,
        bill_source: Source,
        budget_source: Source,
        goal_source: Source,
        clock: Optional[Callable[[], Moment]] = None,
        bus: Optional[EventBus] = None,
        cached: bool = False,
    ):
        self.sources = (
            ("bills", bill_source),
            ("budgets", budget_source),
            ("goals", goal_source),
        )
        self.clock = clock or datetime.now
        self.bus = bus if bus is not None else event_bus
        self.cached = cached

    def _fetch(self, name: str, source: Source, errors: List[dict]) -> tuple:
        try:
            return tuple(source())
        except Exception as e:
            logger.error("Alert source %s failed: %s", name, e)
            err = {"source": name, "message": str(e)}
            errors.append(err)
            self.bus.publish(SOURCE_FAILED, err)
            return ()

    def refresh(self, now: Optional[Moment] = None) -> Dict[str, Any]:
        if now is None:
            now = self.clock()

        errors: List[dict] = []
        bills, budgets, goals = (
            self._fetch(name, source, errors) for name, source in self.sources
        )
        if self.cached:
            alerts = list(cached_alerts(bills, budgets, goals, today_of(now)))
        else:
            alerts = derive_alerts(bills, budgets, goals, now)

        feed = {
            "evaluated_at": now.isoformat(),
            "alerts": alerts,
            **summarize(alerts),
            "errors": errors,
        }
        logger.debug("Derived %d alerts (%d source errors)", len(alerts), len(errors))
        self.bus.publish(ALERTS_DERIVED, feed)
        return feed
