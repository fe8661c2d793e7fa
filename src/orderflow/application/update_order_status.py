"""Application service: Update Order Status use case.

Shipping fulfils every variant line's reservation through the inventory
gateway before the new status is recorded.  A cancelled target goes
through the Cancel Order use case so its precondition and stock releases
apply.  Any other target status is just recorded.
"""

from __future__ import annotations

import structlog

from orderflow.application.cancel_order import CancelOrderHandler
from orderflow.application.dto import OrderDTO, to_order_dto
from orderflow.domain.events import EventBus, OrderEvent, OrderShipped, status_changed
from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.model.order import OrderStatus
from orderflow.domain.repository.order_repository import OrderRepository
from orderflow.domain.service.reservation_service import OrderReservationService

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        reservations: OrderReservationService,
        event_bus: EventBus,
        cancel_handler: CancelOrderHandler,
    ) -> None:
        self._order_repo = order_repo
        self._reservations = reservations
        self._event_bus = event_bus
        self._cancel = cancel_handler

    def handle(
        self, order_id: int, status: OrderStatus, note: str | None = None
    ) -> OrderDTO:
        if status == OrderStatus.CANCELLED:
            return self._cancel.handle(order_id, note)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        old_status = order.status
        shipping = status == OrderStatus.SHIPPED and old_status != OrderStatus.SHIPPED
        if shipping:
            # Fulfill first: shipping cannot be recorded for unreserved stock
            self._reservations.fulfill_for_order(order)

        updated = self._order_repo.update_status(order_id, status, note)
        logger.info(
            "Order status updated",
            order_id=order_id,
            old_status=old_status.value,
            new_status=status.value,
        )

        events: list[OrderEvent] = [status_changed(updated, old_status.value, note)]
        if shipping:
            events.append(
                OrderShipped(
                    order_id=order_id,
                    external_ref=updated.external_ref,
                    customer_id=updated.customer_id,
                )
            )
        self._event_bus.publish(events)
        return to_order_dto(updated)
