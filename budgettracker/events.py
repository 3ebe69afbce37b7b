import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, NamedTuple

__all__ = ['BUDGET_ALERT', 'Event', 'EventBus', 'Handler']

logger = logging.getLogger(__name__)

BUDGET_ALERT = "BUDGET_ALERT"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], Any]


class EventBus:
    """Synchronous fire-and-forget broadcast to subscribed handlers."""

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)

    def clear(self) -> None:
        self._subscribers.clear()

    def publish(self, name: str, payload: dict) -> List[Any]:
        handlers = list(self._subscribers.get(name, []))
        if not handlers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        results = []
        for handler in handlers:
            try:
                results.append(handler(event, payload))
            except Exception:
                # one broken subscriber must not stop the others
                logger.exception("Handler %r failed for event %s", handler, name)
        return results
