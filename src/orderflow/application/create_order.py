"""Application service: Create Order use case.

Placing an order spans three phases that cannot share one transaction:

1. Validation against the shipping, bundle and inventory gateways.
   Nothing is written, so a failure here leaves no trace.
2. One unit of work on the order store: re-read the catalog, compute
   totals, shipping and commission, and persist the pending order.
3. Stock reservation through the gateways, after the commit.  If a line
   cannot be reserved for any reason, the lines already reserved are
   released and the order is cancelled; the caller gets
   InsufficientInventoryError naming the cancelled order.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal

import structlog

from orderflow.application.dto import CreateOrderCommand, OrderDTO, OrderItemSpec, to_order_dto
from orderflow.domain.events import EventBus, OrderCancelled, OrderPlaced, status_changed
from orderflow.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    InsufficientInventoryError,
    InvalidRequestError,
    UnprocessableRequestError,
)
from orderflow.domain.gateway.bundle_gateway import BundleGateway
from orderflow.domain.gateway.inventory_gateway import InventoryReservationGateway
from orderflow.domain.gateway.shipping_gateway import ShippingRateGateway
from orderflow.domain.model.catalog import Bundle, Variant
from orderflow.domain.model.order import Order, OrderItem, OrderStatus, external_reference
from orderflow.domain.model.value_objects import Money, Quantity
from orderflow.domain.repository.catalog_repository import CatalogRepository
from orderflow.domain.repository.order_repository import OrderRepository
from orderflow.domain.service.commission_calculator import CommissionCalculator
from orderflow.domain.service.reservation_service import OrderReservationService

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog_repo: CatalogRepository,
        inventory_gateway: InventoryReservationGateway,
        bundle_gateway: BundleGateway,
        shipping_gateway: ShippingRateGateway,
        commission_calculator: CommissionCalculator,
        reservations: OrderReservationService,
        event_bus: EventBus,
    ) -> None:
        self._order_repo = order_repo
        self._catalog_repo = catalog_repo
        self._inventory = inventory_gateway
        self._bundles = bundle_gateway
        self._shipping = shipping_gateway
        self._commission = commission_calculator
        self._reservations = reservations
        self._event_bus = event_bus

    def handle(self, command: CreateOrderCommand) -> OrderDTO:
        log = logger.bind(customer_id=command.customer_id)

        # Phase 1: validate without writing anything
        self._validate_shipping_method(command.shipping_method_id)
        locations = self._check_availability(command.items)

        # Phase 2: persist the order in one unit of work
        order = self._persist(command)
        log = log.bind(order_id=order.id, external_ref=order.external_ref)
        log.info("Order persisted", total=str(order.total), items=len(order.items))

        # Phase 3: reserve stock, compensating on failure
        try:
            self._reservations.reserve_for_order(order, locations)
        except Exception as exc:
            log.warning("Inventory reservation failed, cancelling order", error=str(exc))
            self._cancel_unreserved(order, f"Inventory reservation failed: {exc}")
            raise InsufficientInventoryError(
                f"Failed to reserve inventory for order {order.external_ref}: {exc}",
                order_id=order.id,
            ) from exc

        placed = self._order_repo.get_by_id(order.id)  # type: ignore[arg-type]
        if placed is None:
            raise EntityNotFoundError(f"Order #{order.id} disappeared after creation")

        self._event_bus.publish([OrderPlaced.from_order(placed)])
        log.info("Order placed")
        return to_order_dto(placed)

    # --- Phase 1 --------------------------------------------------------------

    def _validate_shipping_method(self, method_id: str | None) -> None:
        if method_id is None:
            return
        method = self._shipping.validate(method_id)
        if method is None:
            raise EntityNotFoundError(f"Shipping method '{method_id}' not found")
        if not method.is_active:
            raise InvalidRequestError(f"Shipping method '{method_id}' is not active")

    def _check_availability(self, specs: list[OrderItemSpec]) -> list[str | None]:
        """Validate every line and pick a fulfillment location per variant line."""
        if not specs:
            raise InvalidRequestError("Order must contain at least one item")

        locations: list[str | None] = []
        # units set aside by earlier lines, per variant and location or per bundle
        claimed: dict[str, dict[str, int]] = defaultdict(dict)
        bundles_claimed: dict[str, int] = defaultdict(int)
        for spec in specs:
            if (spec.variant_id is None) == (spec.bundle_id is None):
                raise InvalidRequestError(
                    "Either variant or bundle (but not both) is required for each order item"
                )
            quantity = Quantity(spec.quantity).value

            if spec.bundle_id is not None:
                try:
                    self._bundles.validate_for_order(
                        spec.bundle_id, bundles_claimed[spec.bundle_id] + quantity
                    )
                except DomainException as exc:
                    raise UnprocessableRequestError(
                        f"Bundle '{spec.bundle_id}' cannot be ordered: {exc}"
                    ) from exc
                bundles_claimed[spec.bundle_id] += quantity
                locations.append(None)
                continue

            if self._catalog_repo.get_variant(spec.variant_id) is None:
                raise EntityNotFoundError(f"Variant '{spec.variant_id}' not found")
            taken = claimed[spec.variant_id]
            location_id = self._inventory.find_fulfillment_location(
                spec.variant_id, quantity, taken
            )
            if location_id is None:
                raise InsufficientInventoryError(
                    f"Insufficient inventory for variant {spec.variant_id}. "
                    f"Requested: {quantity}"
                )
            taken[location_id] = taken.get(location_id, 0) + quantity
            locations.append(location_id)
        return locations

    # --- Phase 2 --------------------------------------------------------------

    def _persist(self, command: CreateOrderCommand) -> Order:
        with self._order_repo.transaction():
            items: list[OrderItem] = []
            subtotal = Money.zero()
            weight = Decimal("0")

            for spec in command.items:
                # Re-read inside the transaction so prices are current
                sellable = self._load_sellable(spec)
                item = self._build_item(spec, sellable)
                items.append(item)
                subtotal = subtotal + item.line_total
                weight += sellable.weight * spec.quantity

            shipping = Money.zero()
            if command.shipping_method_id is not None:
                shipping = self._shipping.calculate(
                    command.shipping_method_id, subtotal, weight
                )

            now = datetime.now(timezone.utc)
            order = Order.place(
                external_ref=external_reference(now.year, self._order_repo.last_id() + 1),
                customer_id=command.customer_id,
                items=items,
                shipping=shipping,
                shipping_method_id=command.shipping_method_id,
                billing_address_id=command.billing_address_id,
                shipping_address_id=command.shipping_address_id,
                placed_at=now,
            )
            return self._order_repo.add(order)

    def _load_sellable(self, spec: OrderItemSpec) -> Variant | Bundle:
        if spec.bundle_id is not None:
            bundle = self._catalog_repo.get_bundle(spec.bundle_id)
            if bundle is None:
                raise EntityNotFoundError(f"Bundle '{spec.bundle_id}' not found")
            return bundle
        variant = self._catalog_repo.get_variant(spec.variant_id)
        if variant is None:
            raise EntityNotFoundError(f"Variant '{spec.variant_id}' not found")
        return variant

    def _build_item(self, spec: OrderItemSpec, sellable: Variant | Bundle) -> OrderItem:
        line_total = sellable.price * spec.quantity
        commission = self._commission.calculate(line_total.amount, sellable.seller_id)
        currency = sellable.price.currency
        return OrderItem(
            variant_id=spec.variant_id,
            bundle_id=spec.bundle_id,
            quantity=Quantity(spec.quantity),
            unit_price=sellable.price,
            product_name=sellable.name if isinstance(sellable, Bundle) else sellable.product_name,
            sku=sellable.sku,
            seller_id=sellable.seller_id,
            platform_fee=Money(commission.platform_fee, currency),
            seller_amount=Money(commission.seller_amount, currency),
        )

    # --- Phase 3 compensation -------------------------------------------------

    def _cancel_unreserved(self, order: Order, note: str) -> None:
        cancelled = self._order_repo.update_status(
            order.id, OrderStatus.CANCELLED, note  # type: ignore[arg-type]
        )
        self._event_bus.publish([
            status_changed(cancelled, OrderStatus.PENDING.value, note),
            OrderCancelled(
                order_id=cancelled.id,  # type: ignore[arg-type]
                external_ref=cancelled.external_ref,
                customer_id=cancelled.customer_id,
                reason=note,
            ),
        ])
