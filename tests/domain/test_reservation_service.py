"""Unit tests for the OrderReservationService domain service."""

import pytest

from orderflow.domain.exceptions import (
    InsufficientStockError,
    InvalidStateError,
    UnprocessableRequestError,
)
from orderflow.domain.model.catalog import Bundle, BundleComponent
from orderflow.domain.model.order import Order, OrderItem
from orderflow.domain.model.value_objects import Money, Quantity
from orderflow.domain.service.reservation_service import OrderReservationService
from tests.fakes import FakeBundleGateway, FakeCatalogRepository, FakeInventoryGateway


def _item(qty: int, variant_id: str | None = None, bundle_id: str | None = None) -> OrderItem:
    return OrderItem(
        quantity=Quantity(qty),
        unit_price=Money.of("10.00"),
        product_name=variant_id or bundle_id,
        sku=f"SKU-{variant_id or bundle_id}",
        seller_id="S1",
        platform_fee=Money.zero(),
        seller_amount=Money.of("10.00") * qty,
        variant_id=variant_id,
        bundle_id=bundle_id,
    )


def _make_order(*items: OrderItem) -> Order:
    order = Order.place("ORD-2026-0001", "C1", list(items), Money.zero())
    order.id = 1
    return order


def _setup() -> tuple[OrderReservationService, FakeInventoryGateway, FakeBundleGateway]:
    inventory = FakeInventoryGateway()
    inventory.set_stock("V1", "WH-A", 100)
    inventory.set_stock("V2", "WH-A", 50)
    catalog = FakeCatalogRepository(bundles=[
        Bundle("B1", "Pair", "PAIR", Money.of("18.00"), "S1",
               components=[BundleComponent("V1", 2)]),
    ])
    bundles = FakeBundleGateway(catalog)
    bundles.set_stock("B1", 10)
    return OrderReservationService(inventory, bundles), inventory, bundles


class TestReserveForOrder:

    def test_reserves_every_line(self):
        svc, inventory, bundles = _setup()
        order = _make_order(_item(10, variant_id="V1"), _item(2, bundle_id="B1"))

        svc.reserve_for_order(order, ["WH-A", None])

        assert inventory.level("V1", "WH-A").reserved == 10
        assert bundles.has_reservation("B1", 1)

    def test_failure_releases_lines_already_reserved(self):
        svc, inventory, _ = _setup()
        inventory.fail_reserve.add("V2")
        order = _make_order(_item(10, variant_id="V1"), _item(5, variant_id="V2"))

        with pytest.raises(InsufficientStockError):
            svc.reserve_for_order(order, ["WH-A", "WH-A"])

        assert inventory.level("V1", "WH-A").reserved == 0
        assert inventory.level("V2", "WH-A").reserved == 0

    def test_bundle_failure_releases_variant_lines(self):
        svc, inventory, bundles = _setup()
        bundles.fail_reserve.add("B1")
        order = _make_order(_item(3, variant_id="V1"), _item(1, bundle_id="B1"))

        with pytest.raises(InsufficientStockError):
            svc.reserve_for_order(order, ["WH-A", None])

        assert inventory.level("V1", "WH-A").reserved == 0

    def test_unexpected_gateway_error_also_compensates(self):
        svc, inventory, _ = _setup()
        inventory.reserve_errors["V2"] = TimeoutError("inventory service timed out")
        order = _make_order(_item(10, variant_id="V1"), _item(5, variant_id="V2"))

        with pytest.raises(TimeoutError):
            svc.reserve_for_order(order, ["WH-A", "WH-A"])

        assert inventory.level("V1", "WH-A").reserved == 0

    def test_missing_location_for_variant_rejected(self):
        svc, _, _ = _setup()
        order = _make_order(_item(1, variant_id="V1"))

        with pytest.raises(InvalidStateError, match="No fulfillment location"):
            svc.reserve_for_order(order, [None])


class TestReleaseForOrder:

    def test_releases_variant_and_bundle_lines(self):
        svc, inventory, bundles = _setup()
        order = _make_order(_item(4, variant_id="V1"), _item(2, bundle_id="B1"))
        svc.reserve_for_order(order, ["WH-A", None])

        failed = svc.release_for_order(order)

        assert failed == []
        assert inventory.level("V1", "WH-A").reserved == 0
        assert not bundles.has_reservation("B1", 1)

    def test_lines_without_reservation_are_skipped(self):
        svc, inventory, _ = _setup()
        order = _make_order(_item(4, variant_id="V1"), _item(2, bundle_id="B1"))

        assert svc.release_for_order(order) == []
        assert inventory.level("V1", "WH-A").reserved == 0

    def test_failed_release_is_reported_not_raised(self):
        svc, inventory, bundles = _setup()
        order = _make_order(_item(4, variant_id="V1"), _item(2, bundle_id="B1"))
        svc.reserve_for_order(order, ["WH-A", None])
        inventory.fail_release.add("V1")

        failed = svc.release_for_order(order)

        assert [item.variant_id for item in failed] == ["V1"]
        assert not bundles.has_reservation("B1", 1)


class TestFulfillForOrder:

    def test_deducts_reserved_variant_stock(self):
        svc, inventory, bundles = _setup()
        order = _make_order(_item(10, variant_id="V1"), _item(2, bundle_id="B1"))
        svc.reserve_for_order(order, ["WH-A", None])

        svc.fulfill_for_order(order)

        level = inventory.level("V1", "WH-A")
        assert (level.on_hand, level.reserved) == (90, 0)
        # bundle lines have no fulfillment step
        assert bundles.has_reservation("B1", 1)

    def test_missing_reservation_rejected(self):
        svc, _, _ = _setup()
        order = _make_order(_item(1, variant_id="V1"))

        with pytest.raises(InvalidStateError, match="No reserved inventory found for variant SKU-V1"):
            svc.fulfill_for_order(order)

    def test_retry_after_partial_failure_skips_fulfilled_lines(self):
        svc, inventory, _ = _setup()
        order = _make_order(_item(10, variant_id="V1"), _item(5, variant_id="V2"))
        svc.reserve_for_order(order, ["WH-A", "WH-A"])
        inventory.fail_fulfill.add("V2")

        with pytest.raises(UnprocessableRequestError, match="SKU-V2"):
            svc.fulfill_for_order(order)
        assert inventory.level("V1", "WH-A").on_hand == 90

        inventory.fail_fulfill.clear()
        svc.fulfill_for_order(order)

        mug, plate = inventory.level("V1", "WH-A"), inventory.level("V2", "WH-A")
        assert (mug.on_hand, mug.reserved) == (90, 0)
        assert (plate.on_hand, plate.reserved) == (45, 0)

    def test_repeated_variant_lines_across_locations(self):
        svc, inventory, _ = _setup()
        inventory.set_stock("V1", "WH-B", 4)
        order = _make_order(_item(8, variant_id="V1"), _item(4, variant_id="V1"))
        svc.reserve_for_order(order, ["WH-A", "WH-B"])

        svc.fulfill_for_order(order)

        assert inventory.level("V1", "WH-A").on_hand == 92
        assert inventory.level("V1", "WH-B").on_hand == 0
        assert inventory.fulfilled_quantity("V1", 1) == 12
