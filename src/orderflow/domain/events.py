"""Domain events emitted by the order use cases.

Events are plain immutable records.  Use-case handlers build them
explicitly after a state change and hand them to an ``EventBus``, which
dispatches them synchronously to the handler functions subscribed to
their type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import ClassVar

from orderflow.domain.model.order import Order


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class OrderEvent:
    name: ClassVar[str] = "order.event"

    order_id: int
    external_ref: str
    customer_id: str
    occurred_at: datetime = field(default_factory=_now)

    def payload(self) -> dict:
        return {
            "order_id": self.order_id,
            "external_ref": self.external_ref,
            "customer_id": self.customer_id,
        }


@dataclass(frozen=True, kw_only=True)
class OrderPlaced(OrderEvent):
    name: ClassVar[str] = "order.placed"

    total: str
    item_count: int

    @staticmethod
    def from_order(order: Order) -> OrderPlaced:
        return OrderPlaced(
            order_id=order.id,  # type: ignore[arg-type]
            external_ref=order.external_ref,
            customer_id=order.customer_id,
            total=str(order.total),
            item_count=len(order.items),
        )

    def payload(self) -> dict:
        return {**super().payload(), "total": self.total, "item_count": self.item_count}


@dataclass(frozen=True, kw_only=True)
class OrderStatusChanged(OrderEvent):
    name: ClassVar[str] = "order.status.changed"

    old_status: str
    new_status: str
    note: str | None = None

    def payload(self) -> dict:
        return {
            **super().payload(),
            "old_status": self.old_status,
            "new_status": self.new_status,
            "note": self.note,
        }


@dataclass(frozen=True, kw_only=True)
class OrderShipped(OrderEvent):
    name: ClassVar[str] = "order.shipped"


@dataclass(frozen=True, kw_only=True)
class OrderCancelled(OrderEvent):
    name: ClassVar[str] = "order.cancelled"

    reason: str | None = None

    def payload(self) -> dict:
        return {**super().payload(), "reason": self.reason}


def status_changed(order: Order, old_status: str, note: str | None) -> OrderStatusChanged:
    return OrderStatusChanged(
        order_id=order.id,  # type: ignore[arg-type]
        external_ref=order.external_ref,
        customer_id=order.customer_id,
        old_status=old_status,
        new_status=order.status.value,
        note=note,
    )


EventHandler = Callable[[OrderEvent], None]


class EventBus(ABC):
    """Port for publishing order events to in-process subscribers."""

    @abstractmethod
    def subscribe(self, event_type: type[OrderEvent], handler: EventHandler) -> None:
        """Call ``handler`` for every published event of ``event_type``.

        Subscribing to ``OrderEvent`` itself receives every event.
        """

    @abstractmethod
    def publish(self, events: list[OrderEvent]) -> None:
        """Dispatch ``events`` in order, synchronously."""
