"""OrderOrchestrator: the single entry point for order use cases.

Wires the use-case handlers together from explicitly passed
collaborators, so any gateway or repository can be swapped for a test
double.
"""

from __future__ import annotations

from orderflow.application.cancel_order import CancelOrderHandler
from orderflow.application.create_order import CreateOrderHandler
from orderflow.application.dto import CreateOrderCommand, OrderDTO, PageDTO
from orderflow.application.list_orders import CustomerOrdersHandler, ListOrdersHandler
from orderflow.application.show_order import ShowOrderHandler
from orderflow.application.update_order_status import UpdateOrderStatusHandler
from orderflow.domain.events import EventBus
from orderflow.domain.gateway.bundle_gateway import BundleGateway
from orderflow.domain.gateway.inventory_gateway import InventoryReservationGateway
from orderflow.domain.gateway.shipping_gateway import ShippingRateGateway
from orderflow.domain.model.order import OrderStatus
from orderflow.domain.repository.catalog_repository import CatalogRepository
from orderflow.domain.repository.order_query import OrderFilter
from orderflow.domain.repository.order_repository import OrderRepository
from orderflow.domain.service.commission_calculator import CommissionCalculator
from orderflow.domain.service.reservation_service import OrderReservationService


class OrderOrchestrator:

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog_repo: CatalogRepository,
        inventory_gateway: InventoryReservationGateway,
        bundle_gateway: BundleGateway,
        shipping_gateway: ShippingRateGateway,
        commission_calculator: CommissionCalculator,
        event_bus: EventBus,
    ) -> None:
        reservations = OrderReservationService(inventory_gateway, bundle_gateway)
        self._create = CreateOrderHandler(
            order_repo=order_repo,
            catalog_repo=catalog_repo,
            inventory_gateway=inventory_gateway,
            bundle_gateway=bundle_gateway,
            shipping_gateway=shipping_gateway,
            commission_calculator=commission_calculator,
            reservations=reservations,
            event_bus=event_bus,
        )
        self._cancel = CancelOrderHandler(order_repo, reservations, event_bus)
        self._update_status = UpdateOrderStatusHandler(
            order_repo, reservations, event_bus, self._cancel
        )
        self._show = ShowOrderHandler(order_repo)
        self._list = ListOrdersHandler(order_repo)
        self._customer_orders = CustomerOrdersHandler(order_repo)

    def create_order(self, command: CreateOrderCommand) -> OrderDTO:
        return self._create.handle(command)

    def update_status(
        self, order_id: int, status: OrderStatus, note: str | None = None
    ) -> OrderDTO:
        return self._update_status.handle(order_id, status, note)

    def cancel_order(self, order_id: int, reason: str | None = None) -> OrderDTO:
        return self._cancel.handle(order_id, reason)

    def get_order(self, order_id: int) -> OrderDTO:
        return self._show.handle(order_id)

    def get_customer_orders(self, customer_id: str) -> list[OrderDTO]:
        return self._customer_orders.handle(customer_id)

    def list_orders(self, filters: OrderFilter | None = None) -> PageDTO:
        return self._list.handle(filters)
