"""Integration tests for the CancelOrder use case."""

import pytest

from orderflow.application.dto import CreateOrderCommand, OrderItemSpec
from orderflow.domain.exceptions import EntityNotFoundError, InvalidStateError
from orderflow.domain.model.order import OrderStatus
from tests.fakes import build_world


def _place(world) -> int:
    command = CreateOrderCommand(
        customer_id="C1",
        items=[
            OrderItemSpec(quantity=2, variant_id="V1"),
            OrderItemSpec(quantity=1, bundle_id="B1"),
        ],
    )
    return world.orchestrator.create_order(command).id


class TestCancelOrder:

    def test_pending_order_releases_all_reservations(self):
        world = build_world()
        order_id = _place(world)

        dto = world.orchestrator.cancel_order(order_id, "changed my mind")

        assert dto.status == "cancelled"
        assert dto.history[-1].note == "changed my mind"
        assert world.inventory.level("V1", "WH-A").reserved == 0
        assert not world.bundles.has_reservation("B1", order_id)

    def test_processing_order_can_be_cancelled(self):
        world = build_world()
        order_id = _place(world)
        world.orchestrator.update_status(order_id, OrderStatus.PROCESSING)

        dto = world.orchestrator.cancel_order(order_id)

        assert dto.status == "cancelled"

    def test_shipped_order_cannot_be_cancelled(self):
        world = build_world()
        order_id = _place(world)
        world.orchestrator.update_status(order_id, OrderStatus.SHIPPED)

        with pytest.raises(InvalidStateError, match="Only pending or processing"):
            world.orchestrator.cancel_order(order_id)

    def test_cancelled_order_cannot_be_cancelled_again(self):
        world = build_world()
        order_id = _place(world)
        world.orchestrator.cancel_order(order_id)

        with pytest.raises(InvalidStateError):
            world.orchestrator.cancel_order(order_id)

    def test_release_failure_does_not_block_cancellation(self):
        world = build_world()
        order_id = _place(world)
        world.inventory.fail_release.add("V1")

        dto = world.orchestrator.cancel_order(order_id)

        assert dto.status == "cancelled"
        assert not world.bundles.has_reservation("B1", order_id)
        # the stranded hold is left for an operator to clean up
        assert world.inventory.level("V1", "WH-A").reserved == 2

    def test_publishes_cancellation_events(self):
        world = build_world()
        order_id = _place(world)
        world.events.published.clear()

        world.orchestrator.cancel_order(order_id, "fraud check")

        assert world.events.names() == ["order.status.changed", "order.cancelled"]
        assert world.events.published[1].reason == "fraud check"

    def test_unknown_order(self):
        world = build_world()
        with pytest.raises(EntityNotFoundError):
            world.orchestrator.cancel_order(99)
