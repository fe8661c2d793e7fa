"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.model.order import Order, OrderItem, OrderStatus, StatusHistoryEntry
from orderflow.domain.model.value_objects import Money, Quantity
from orderflow.domain.repository.order_query import OrderFilter, Page
from orderflow.domain.repository.order_repository import OrderRepository
from orderflow.infrastructure.persistence.json_document import JsonDocument


def _empty() -> dict:
    return {"orders": []}


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._document = JsonDocument(file_path, _empty)

    # --- OrderRepository interface --------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._document.transaction():
            yield

    def last_id(self) -> int:
        orders = self._document.read()["orders"]
        return max((o["id"] for o in orders), default=0)

    def add(self, order: Order) -> Order:
        with self._document.transaction() as data:
            order.id = max((o["id"] for o in data["orders"]), default=0) + 1
            next_item_id = max(
                (i["id"] for o in data["orders"] for i in o["items"]), default=0
            ) + 1
            order.items = [
                replace(item, id=next_item_id + n) for n, item in enumerate(order.items)
            ]
            data["orders"].append(self._to_raw(order))
        return order

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._document.read()["orders"]:
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def find_by_customer(self, customer_id: str) -> list[Order]:
        orders = [
            self._to_domain(raw)
            for raw in self._document.read()["orders"]
            if raw["customer_id"] == customer_id
        ]
        return sorted(orders, key=lambda o: (o.placed_at, o.id), reverse=True)

    def find_with_filters(self, filters: OrderFilter) -> Page[Order]:
        orders = [self._to_domain(raw) for raw in self._document.read()["orders"]]
        return filters.apply(orders)

    def update_status(
        self, order_id: int, status: OrderStatus, note: str | None = None
    ) -> Order:
        with self._document.transaction() as data:
            for i, raw in enumerate(data["orders"]):
                if raw["id"] == order_id:
                    order = self._to_domain(raw)
                    order.record_status(status, note)
                    data["orders"][i] = self._to_raw(order)
                    return order
        raise EntityNotFoundError(f"Order #{order_id} not found")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "external_ref": order.external_ref,
            "customer_id": order.customer_id,
            "status": order.status.value,
            "currency": order.subtotal.currency,
            "subtotal": str(order.subtotal.amount),
            "shipping": str(order.shipping.amount),
            "discount": str(order.discount.amount),
            "tax": str(order.tax.amount),
            "total": str(order.total.amount),
            "shipping_method_id": order.shipping_method_id,
            "billing_address_id": order.billing_address_id,
            "shipping_address_id": order.shipping_address_id,
            "placed_at": order.placed_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [
                {
                    "id": item.id,
                    "variant_id": item.variant_id,
                    "bundle_id": item.bundle_id,
                    "product_name": item.product_name,
                    "sku": item.sku,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "line_total": str(item.line_total.amount),
                    "seller_id": item.seller_id,
                    "platform_fee": str(item.platform_fee.amount),
                    "seller_amount": str(item.seller_amount.amount),
                }
                for item in order.items
            ],
            "history": [
                {
                    "status": entry.status.value,
                    "note": entry.note,
                    "created_at": entry.created_at.isoformat(),
                }
                for entry in order.history
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")

        def money(value: str) -> Money:
            return Money(Decimal(value), currency)

        items = [
            OrderItem(
                id=i["id"],
                variant_id=i.get("variant_id"),
                bundle_id=i.get("bundle_id"),
                product_name=i["product_name"],
                sku=i["sku"],
                quantity=Quantity(i["quantity"]),
                unit_price=money(i["unit_price"]),
                seller_id=i["seller_id"],
                platform_fee=money(i["platform_fee"]),
                seller_amount=money(i["seller_amount"]),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            external_ref=raw["external_ref"],
            customer_id=raw["customer_id"],
            items=items,
            subtotal=money(raw["subtotal"]),
            shipping=money(raw["shipping"]),
            discount=money(raw["discount"]),
            tax=money(raw["tax"]),
            status=OrderStatus(raw["status"]),
            shipping_method_id=raw.get("shipping_method_id"),
            billing_address_id=raw.get("billing_address_id"),
            shipping_address_id=raw.get("shipping_address_id"),
            placed_at=datetime.fromisoformat(raw["placed_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            history=[
                StatusHistoryEntry(
                    status=OrderStatus(h["status"]),
                    note=h.get("note"),
                    created_at=datetime.fromisoformat(h["created_at"]),
                )
                for h in raw.get("history", [])
            ],
        )
