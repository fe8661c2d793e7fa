"""Unit tests for the Order aggregate and its business rules."""

from datetime import datetime, timezone

import pytest

from orderflow.domain.exceptions import InvalidRequestError, InvalidStateError
from orderflow.domain.model.order import (
    Order,
    OrderItem,
    OrderStatus,
    external_reference,
)
from orderflow.domain.model.value_objects import Money, Quantity


def _make_item(
    qty: int = 1,
    price: str = "15.00",
    variant_id: str | None = "V1",
    bundle_id: str | None = None,
    fee: str = "0.00",
) -> OrderItem:
    """Helper to build a valid line item."""
    line_total = Money.of(price) * qty
    return OrderItem(
        quantity=Quantity(qty),
        unit_price=Money.of(price),
        product_name="Mug",
        sku="MUG-1",
        seller_id="S1",
        platform_fee=Money.of(fee),
        seller_amount=line_total - Money.of(fee),
        variant_id=variant_id,
        bundle_id=bundle_id,
    )


class TestOrderItem:

    def test_line_total(self):
        assert _make_item(qty=2, price="25.00").line_total == Money.of("50.00")

    def test_requires_a_sellable(self):
        with pytest.raises(InvalidRequestError, match="exactly one"):
            _make_item(variant_id=None, bundle_id=None)

    def test_rejects_both_variant_and_bundle(self):
        with pytest.raises(InvalidRequestError, match="exactly one"):
            _make_item(variant_id="V1", bundle_id="B1")

    def test_bundle_item(self):
        item = _make_item(variant_id=None, bundle_id="B1")
        assert item.is_bundle
        assert item.sellable_id == "B1"


class TestPlaceOrder:

    def test_happy_path(self):
        order = Order.place(
            external_ref="ORD-2026-0001",
            customer_id="C1",
            items=[_make_item(qty=2, price="25.00")],
            shipping=Money.of("5.00"),
        )
        assert order.status == OrderStatus.PENDING
        assert order.id is None  # assigned by repository
        assert order.subtotal == Money.of("50.00")
        assert order.discount == Money.zero()
        assert order.tax == Money.zero()
        assert order.total == Money.of("55.00")

    def test_records_initial_history(self):
        order = Order.place("ORD-2026-0001", "C1", [_make_item()], Money.zero())
        assert [h.status for h in order.history] == [OrderStatus.PENDING]
        assert order.history[0].note == "Order placed"

    def test_customer_required(self):
        with pytest.raises(InvalidRequestError, match="Customer is required"):
            Order.place("ORD-2026-0001", "  ", [_make_item()], Money.zero())

    def test_items_required(self):
        with pytest.raises(InvalidRequestError, match="at least one item"):
            Order.place("ORD-2026-0001", "C1", [], Money.zero())

    def test_platform_fee_total(self):
        order = Order.place(
            "ORD-2026-0001",
            "C1",
            [_make_item(price="10.00", fee="1.00"), _make_item(price="20.00", fee="2.00")],
            Money.zero(),
        )
        assert order.platform_fee_total == Money.of("3.00")


class TestRecordStatus:

    def test_returns_previous_and_appends_history(self):
        order = Order.place("ORD-2026-0001", "C1", [_make_item()], Money.zero())
        at = datetime(2026, 3, 1, tzinfo=timezone.utc)

        previous = order.record_status(OrderStatus.PROCESSING, "picked", at=at)

        assert previous == OrderStatus.PENDING
        assert order.status == OrderStatus.PROCESSING
        assert order.updated_at == at
        assert order.history[-1].note == "picked"
        assert len(order.history) == 2


class TestCancellable:

    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.PROCESSING])
    def test_open_orders_can_be_cancelled(self, status):
        order = Order.place("ORD-2026-0001", "C1", [_make_item()], Money.zero())
        order.status = status
        order.ensure_cancellable()

    @pytest.mark.parametrize("status", [OrderStatus.SHIPPED, OrderStatus.CANCELLED])
    def test_terminal_orders_cannot_be_cancelled(self, status):
        order = Order.place("ORD-2026-0001", "C1", [_make_item()], Money.zero())
        order.status = status
        with pytest.raises(InvalidStateError, match="Only pending or processing"):
            order.ensure_cancellable()


class TestOrderStatus:

    def test_parse_is_case_insensitive(self):
        assert OrderStatus.parse(" Shipped ") == OrderStatus.SHIPPED

    def test_parse_rejects_unknown(self):
        with pytest.raises(InvalidRequestError, match="Unknown order status"):
            OrderStatus.parse("delivered")


class TestExternalReference:

    def test_zero_padded(self):
        assert external_reference(2026, 7) == "ORD-2026-0007"

    def test_wider_sequences_are_not_truncated(self):
        assert external_reference(2026, 12345) == "ORD-2026-12345"
