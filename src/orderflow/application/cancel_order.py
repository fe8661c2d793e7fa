"""Application service: Cancel Order use case.

Only pending or processing orders can be cancelled.  Every reserved line
is released first; releases are best effort, so a line that fails to
release is logged and never blocks the cancellation itself.
"""

from __future__ import annotations

import structlog

from orderflow.application.dto import OrderDTO, to_order_dto
from orderflow.domain.events import EventBus, OrderCancelled, status_changed
from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.model.order import OrderStatus
from orderflow.domain.repository.order_repository import OrderRepository
from orderflow.domain.service.reservation_service import OrderReservationService

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        reservations: OrderReservationService,
        event_bus: EventBus,
    ) -> None:
        self._order_repo = order_repo
        self._reservations = reservations
        self._event_bus = event_bus

    def handle(self, order_id: int, reason: str | None = None) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        order.ensure_cancellable()
        old_status = order.status

        failed = self._reservations.release_for_order(order)
        if failed:
            logger.warning(
                "Order cancelled with unreleased reservations",
                order_id=order_id,
                skus=[item.sku for item in failed],
            )

        cancelled = self._order_repo.update_status(order_id, OrderStatus.CANCELLED, reason)
        logger.info("Order cancelled", order_id=order_id, reason=reason)

        self._event_bus.publish([
            status_changed(cancelled, old_status.value, reason),
            OrderCancelled(
                order_id=order_id,
                external_ref=cancelled.external_ref,
                customer_id=cancelled.customer_id,
                reason=reason,
            ),
        ])
        return to_order_dto(cancelled)
