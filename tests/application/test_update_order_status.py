"""Integration tests for the UpdateOrderStatus use case."""

import pytest

from orderflow.application.dto import CreateOrderCommand, OrderItemSpec
from orderflow.domain.exceptions import (
    EntityNotFoundError,
    InvalidStateError,
    UnprocessableRequestError,
)
from orderflow.domain.model.order import OrderStatus
from tests.fakes import build_world


def _place(world, *specs: OrderItemSpec) -> int:
    command = CreateOrderCommand(customer_id="C1", items=list(specs))
    return world.orchestrator.create_order(command).id


class TestShipping:

    def test_end_to_end_create_then_ship(self):
        world = build_world()
        order_id = _place(world, OrderItemSpec(quantity=2, variant_id="V1"))

        dto = world.orchestrator.update_status(order_id, OrderStatus.SHIPPED)

        assert dto.status == "shipped"
        assert dto.total == "$50.00"
        assert [h.status for h in dto.history] == ["pending", "shipped"]

    def test_fulfills_every_variant_reservation(self):
        world = build_world()
        order_id = _place(
            world,
            OrderItemSpec(quantity=2, variant_id="V1"),
            OrderItemSpec(quantity=3, variant_id="V2"),
        )

        world.orchestrator.update_status(order_id, OrderStatus.SHIPPED)

        mug = world.inventory.level("V1", "WH-A")
        plate = world.inventory.level("V2", "WH-A")
        assert (mug.on_hand, mug.reserved) == (8, 0)
        assert (plate.on_hand, plate.reserved) == (0, 0)

    def test_bundle_lines_do_not_block_shipping(self):
        world = build_world()
        order_id = _place(world, OrderItemSpec(quantity=1, bundle_id="B1"))

        dto = world.orchestrator.update_status(order_id, OrderStatus.SHIPPED)

        assert dto.status == "shipped"

    def test_without_reservation_fails(self):
        world = build_world()
        order_id = _place(world, OrderItemSpec(quantity=2, variant_id="V1"))
        world.inventory.ledger.release("V1", 2, order_id, "WH-A")

        with pytest.raises(InvalidStateError, match="No reserved inventory found"):
            world.orchestrator.update_status(order_id, OrderStatus.SHIPPED)

        assert world.orders.get_by_id(order_id).status == OrderStatus.PENDING

    def test_publishes_status_changed_and_shipped(self):
        world = build_world()
        order_id = _place(world, OrderItemSpec(quantity=1, variant_id="V1"))
        world.events.published.clear()

        world.orchestrator.update_status(order_id, OrderStatus.SHIPPED, "via courier")

        assert world.events.names() == ["order.status.changed", "order.shipped"]
        changed = world.events.published[0]
        assert (changed.old_status, changed.new_status, changed.note) == (
            "pending",
            "shipped",
            "via courier",
        )


class TestOtherTransitions:

    def test_processing_records_note(self):
        world = build_world()
        order_id = _place(world, OrderItemSpec(quantity=1, variant_id="V1"))

        dto = world.orchestrator.update_status(order_id, OrderStatus.PROCESSING, "picked")

        assert dto.status == "processing"
        assert dto.history[-1].note == "picked"
        # stock stays reserved until shipping
        assert world.inventory.level("V1", "WH-A").reserved == 1

    def test_unknown_order(self):
        world = build_world()
        with pytest.raises(EntityNotFoundError, match="Order #42 not found"):
            world.orchestrator.update_status(42, OrderStatus.PROCESSING)


class TestCancelledTarget:

    def test_releases_reservations_like_cancel(self):
        world = build_world()
        order_id = _place(world, OrderItemSpec(quantity=2, variant_id="V1"))

        dto = world.orchestrator.update_status(order_id, OrderStatus.CANCELLED, "customer request")

        assert dto.status == "cancelled"
        assert dto.history[-1].note == "customer request"
        assert world.inventory.level("V1", "WH-A").reserved == 0
        assert world.events.names()[-2:] == ["order.status.changed", "order.cancelled"]

    def test_shipped_order_cannot_be_cancelled(self):
        world = build_world()
        order_id = _place(world, OrderItemSpec(quantity=1, variant_id="V1"))
        world.orchestrator.update_status(order_id, OrderStatus.SHIPPED)

        with pytest.raises(InvalidStateError, match="Only pending or processing"):
            world.orchestrator.update_status(order_id, OrderStatus.CANCELLED)

        assert world.orders.get_by_id(order_id).status == OrderStatus.SHIPPED


class TestShippingRetry:

    def test_retry_after_failed_fulfillment_ships(self):
        world = build_world()
        order_id = _place(
            world,
            OrderItemSpec(quantity=2, variant_id="V1"),
            OrderItemSpec(quantity=1, variant_id="V2"),
        )
        world.inventory.fail_fulfill.add("V2")

        with pytest.raises(UnprocessableRequestError, match="PLATE-1"):
            world.orchestrator.update_status(order_id, OrderStatus.SHIPPED)
        assert world.orders.get_by_id(order_id).status == OrderStatus.PENDING

        world.inventory.fail_fulfill.clear()
        dto = world.orchestrator.update_status(order_id, OrderStatus.SHIPPED)

        assert dto.status == "shipped"
        mug = world.inventory.level("V1", "WH-A")
        assert (mug.on_hand, mug.reserved) == (8, 0)
        assert world.inventory.level("V2", "WH-A").on_hand == 2
