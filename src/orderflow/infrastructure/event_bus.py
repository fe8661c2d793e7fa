"""In-memory event bus.

Distributes order events to handler functions within the same process,
synchronously and in publication order.  A failing handler is logged and
does not prevent the remaining handlers from running.
"""

from __future__ import annotations

import threading
from collections import defaultdict

import structlog

from orderflow.domain.events import EventBus, EventHandler, OrderEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(EventBus):

    def __init__(self) -> None:
        self._subscribers: dict[type[OrderEvent], list[EventHandler]] = defaultdict(list)
        self._lock = threading.RLock()

    def subscribe(self, event_type: type[OrderEvent], handler: EventHandler) -> None:
        with self._lock:
            self._subscribers[event_type].append(handler)

    def publish(self, events: list[OrderEvent]) -> None:
        for event in events:
            self._dispatch(event)

    def _dispatch(self, event: OrderEvent) -> None:
        with self._lock:
            handlers = [
                handler
                for event_type, subscribed in self._subscribers.items()
                if isinstance(event, event_type)
                for handler in subscribed
            ]

        if not handlers:
            logger.debug("No handlers for event", event_name=event.name)
            return

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Event handler failed",
                    event_name=event.name,
                    order_id=event.order_id,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                )
