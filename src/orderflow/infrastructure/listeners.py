"""Order event listeners registered at start-up.

Notification delivery lives outside this system; the log listener makes
every order event visible in the structured log instead.
"""

from __future__ import annotations

import structlog

from orderflow.domain.events import EventBus, OrderEvent

logger = structlog.get_logger(__name__)


def log_order_event(event: OrderEvent) -> None:
    logger.info(event.name, **event.payload())


def register_listeners(event_bus: EventBus) -> None:
    event_bus.subscribe(OrderEvent, log_order_event)
