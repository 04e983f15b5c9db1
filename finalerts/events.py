from typing import Callable, Dict, List, NamedTuple
from datetime import datetime

__all__ = ['event_bus', 'ALERTS_DERIVED', 'SOURCE_FAILED', 'Event', 'EventBus',
           'badge_handler', 'register_default_handlers']

Handler = Callable[['Event', dict], dict]


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


class EventBus:
    """Synchronous publish/subscribe; handlers run in subscription order."""

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = list(self._subscribers.get(name, []))
        if not handlers:
            return []
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in handlers]


# payload: the feed dict built by AlertService.refresh
ALERTS_DERIVED = "ALERTS_DERIVED"
# payload: {"source": ..., "message": ...}
SOURCE_FAILED = "SOURCE_FAILED"

event_bus = EventBus()


def badge_handler(event: Event, payload: dict) -> dict:
    return {"badge": payload.get("unread_count", 0)}


def register_default_handlers(bus: EventBus = event_bus) -> None:
    bus.subscribe(ALERTS_DERIVED, badge_handler)


register_default_handlers()
