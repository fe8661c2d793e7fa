"""Integration tests for order queries: show, customer history and listing."""

import pytest

from orderflow.application.dto import CreateOrderCommand, OrderItemSpec
from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.model.order import OrderStatus
from orderflow.domain.repository.order_query import OrderFilter, SortField
from tests.fakes import build_world


def _seed(world) -> list[int]:
    ids = []
    for customer, qty in [("alice", 1), ("bob", 2), ("alice", 3)]:
        command = CreateOrderCommand(
            customer_id=customer, items=[OrderItemSpec(quantity=qty, variant_id="V1")]
        )
        ids.append(world.orchestrator.create_order(command).id)
    return ids


class TestGetOrder:

    def test_returns_full_order(self):
        world = build_world()
        first, _, _ = _seed(world)

        dto = world.orchestrator.get_order(first)

        assert dto.customer_id == "alice"
        assert dto.items[0].sku == "MUG-1"

    def test_unknown_order(self):
        world = build_world()
        with pytest.raises(EntityNotFoundError):
            world.orchestrator.get_order(7)


class TestCustomerOrders:

    def test_newest_first(self):
        world = build_world()
        first, _, third = _seed(world)

        orders = world.orchestrator.get_customer_orders("alice")

        assert [o.id for o in orders] == [third, first]

    def test_unknown_customer_has_no_orders(self):
        world = build_world()
        _seed(world)
        assert world.orchestrator.get_customer_orders("zed") == []


class TestListOrders:

    def test_defaults(self):
        world = build_world()
        ids = _seed(world)

        page = world.orchestrator.list_orders()

        assert [o.id for o in page.items] == list(reversed(ids))
        assert (page.page, page.limit, page.total_items) == (1, 10, 3)
        assert not page.has_next

    def test_filters_by_status(self):
        world = build_world()
        first, second, _ = _seed(world)
        world.orchestrator.cancel_order(second)

        page = world.orchestrator.list_orders(OrderFilter(status=OrderStatus.CANCELLED))

        assert [o.id for o in page.items] == [second]

    def test_sorted_and_paginated(self):
        world = build_world()
        first, second, third = _seed(world)

        page = world.orchestrator.list_orders(
            OrderFilter(sort_by=SortField.TOTAL, page=1, limit=2)
        )

        assert [o.total for o in page.items] == ["$25.00", "$50.00"]
        assert page.total_pages == 2
        assert page.has_next
