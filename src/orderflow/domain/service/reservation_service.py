"""Domain service: Order Reservation.

Coordinates the per-line calls to the inventory and bundle gateways for
one order.  Gateways cannot join the order store's unit of work, so each
operation here is a sequence of independent calls:

- ``reserve_for_order`` reserves line by line and, when a line fails,
  compensates by releasing the lines already reserved before re-raising.
- ``release_for_order`` is best effort: a line that cannot be released is
  logged and skipped so cancellation can always go through.
- ``fulfill_for_order`` converts every variant reservation into a
  permanent stock decrement and fails if one is missing.  Lines already
  fulfilled for the order are skipped, so a shipment that failed halfway
  can be retried.
"""

from __future__ import annotations

import structlog

from orderflow.domain.exceptions import (
    DomainException,
    InvalidStateError,
    NotReservedError,
    UnprocessableRequestError,
)
from orderflow.domain.gateway.bundle_gateway import BundleGateway
from orderflow.domain.gateway.inventory_gateway import InventoryReservationGateway
from orderflow.domain.model.order import Order, OrderItem

logger = structlog.get_logger(__name__)


class OrderReservationService:

    def __init__(
        self,
        inventory_gateway: InventoryReservationGateway,
        bundle_gateway: BundleGateway,
    ) -> None:
        self._inventory = inventory_gateway
        self._bundles = bundle_gateway

    def reserve_for_order(self, order: Order, locations: list[str | None]) -> None:
        """Reserve every line, in item order.

        ``locations`` holds, per item, the fulfillment location chosen during
        validation (``None`` for bundle lines).
        """
        reserved: list[OrderItem] = []
        for item, location_id in zip(order.items, locations, strict=True):
            try:
                self._reserve_item(order.id, item, location_id)
            except Exception:
                if reserved:
                    logger.info(
                        "Compensating partial reservation",
                        order_id=order.id,
                        reserved_lines=len(reserved),
                    )
                    self.release_items(order.id, reserved)
                raise
            reserved.append(item)

    def release_for_order(self, order: Order) -> list[OrderItem]:
        """Release every line that holds a reservation.

        Returns the items whose release failed.
        """
        return self.release_items(order.id, order.items)

    def release_items(self, order_id: int, items: list[OrderItem]) -> list[OrderItem]:
        failed: list[OrderItem] = []
        for item in items:
            try:
                self._release_item(order_id, item)
            except Exception as exc:
                logger.warning(
                    "Failed to release reservation",
                    order_id=order_id,
                    sku=item.sku,
                    error=str(exc),
                )
                failed.append(item)
        return failed

    def fulfill_for_order(self, order: Order) -> None:
        """Fulfill the reservation of every variant line.

        Bundle lines have no fulfillment step and are skipped, as are lines
        covered by units already fulfilled for this order.
        """
        done: dict[str, int] = {}
        for item in order.variant_items:
            if item.variant_id not in done:
                done[item.variant_id] = self._inventory.fulfilled_quantity(
                    item.variant_id, order.id
                )
            if done[item.variant_id] >= item.quantity.value:
                done[item.variant_id] -= item.quantity.value
                continue
            location_id = self._inventory.find_reserved_location(
                item.variant_id, order.id
            )
            if location_id is None:
                raise InvalidStateError(
                    f"No reserved inventory found for variant {item.sku}"
                )
            try:
                self._inventory.fulfill(
                    item.variant_id,
                    location_id,
                    item.quantity.value,
                    order.id,
                )
            except NotReservedError as exc:
                raise InvalidStateError(
                    f"No reserved inventory found for variant {item.sku}: {exc}"
                ) from exc
            except DomainException as exc:
                raise UnprocessableRequestError(
                    f"Failed to fulfill inventory for variant {item.sku}: {exc}"
                ) from exc

    # --- Internal helpers -----------------------------------------------------

    def _reserve_item(self, order_id: int, item: OrderItem, location_id: str | None) -> None:
        qty = item.quantity.value
        if item.is_bundle:
            self._bundles.reserve(item.bundle_id, qty, order_id)
            return
        if location_id is None:
            raise InvalidStateError(
                f"No fulfillment location chosen for variant {item.sku}"
            )
        self._inventory.reserve(item.variant_id, location_id, qty, order_id)

    def _release_item(self, order_id: int, item: OrderItem) -> None:
        qty = item.quantity.value
        if item.is_bundle:
            if self._bundles.has_reservation(item.bundle_id, order_id):
                self._bundles.release(item.bundle_id, qty, order_id)
            return
        location_id = self._inventory.find_reserved_location(item.variant_id, order_id)
        if location_id is not None:
            self._inventory.release(item.variant_id, location_id, qty, order_id)
