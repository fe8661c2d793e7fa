"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from orderflow.domain.model.order import Order, OrderItem, StatusHistoryEntry
from orderflow.domain.repository.order_query import Page

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one requested line, a variant *or* a bundle, and a quantity."""

    quantity: int
    variant_id: str | None = None
    bundle_id: str | None = None


@dataclass(frozen=True)
class CreateOrderCommand:
    """Input: everything needed to place an order."""

    customer_id: str
    items: list[OrderItemSpec]
    shipping_method_id: str | None = None
    billing_address_id: str | None = None
    shipping_address_id: str | None = None


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single line item as displayed to the user."""

    id: int | None
    kind: str  # "variant" or "bundle"
    sellable_id: str
    product_name: str
    sku: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    seller_id: str
    platform_fee: str
    seller_amount: str


@dataclass(frozen=True)
class StatusHistoryDTO:
    status: str
    note: str | None
    created_at: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    external_ref: str
    customer_id: str
    status: str
    items: list[OrderItemDTO]
    subtotal: str
    shipping: str
    discount: str
    tax: str
    total: str
    placed_at: str
    updated_at: str
    shipping_method_id: str | None = None
    billing_address_id: str | None = None
    shipping_address_id: str | None = None
    history: list[StatusHistoryDTO] = field(default_factory=list)


@dataclass(frozen=True)
class PageDTO:
    """Output: one page of orders plus pagination metadata."""

    items: list[OrderDTO]
    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next: bool
    has_prev: bool


# --- Mapping ------------------------------------------------------------------


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        external_ref=order.external_ref,
        customer_id=order.customer_id,
        status=order.status.value,
        items=[_to_item_dto(item) for item in order.items],
        subtotal=str(order.subtotal),
        shipping=str(order.shipping),
        discount=str(order.discount),
        tax=str(order.tax),
        total=str(order.total),
        placed_at=order.placed_at.strftime(TIMESTAMP_FORMAT),
        updated_at=order.updated_at.strftime(TIMESTAMP_FORMAT),
        shipping_method_id=order.shipping_method_id,
        billing_address_id=order.billing_address_id,
        shipping_address_id=order.shipping_address_id,
        history=[_to_history_dto(entry) for entry in order.history],
    )


def to_page_dto(page: Page[Order]) -> PageDTO:
    return PageDTO(
        items=[to_order_dto(order) for order in page.items],
        page=page.page,
        limit=page.limit,
        total_items=page.total_items,
        total_pages=page.total_pages,
        has_next=page.has_next,
        has_prev=page.has_prev,
    )


def _to_item_dto(item: OrderItem) -> OrderItemDTO:
    return OrderItemDTO(
        id=item.id,
        kind="bundle" if item.is_bundle else "variant",
        sellable_id=item.sellable_id,
        product_name=item.product_name,
        sku=item.sku,
        quantity=item.quantity.value,
        unit_price=str(item.unit_price),
        line_total=str(item.line_total),
        seller_id=item.seller_id,
        platform_fee=str(item.platform_fee),
        seller_amount=str(item.seller_amount),
    )


def _to_history_dto(entry: StatusHistoryEntry) -> StatusHistoryDTO:
    return StatusHistoryDTO(
        status=entry.status.value,
        note=entry.note,
        created_at=entry.created_at.strftime(TIMESTAMP_FORMAT),
    )
