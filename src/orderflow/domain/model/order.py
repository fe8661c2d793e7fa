"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items and its status
history.  Totals are derived from their components; the only mutation
after placement is a status change, which always appends a history entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from orderflow.domain.exceptions import InvalidRequestError, InvalidStateError
from orderflow.domain.model.value_objects import Money, Quantity

REFERENCE_PREFIX = "ORD"


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"

    @staticmethod
    def parse(raw: str) -> OrderStatus:
        try:
            return OrderStatus(raw.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise InvalidRequestError(
                f"Unknown order status '{raw}' (expected one of: {allowed})"
            ) from exc


CANCELLABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.PROCESSING)


def external_reference(year: int, sequence: int) -> str:
    """Build the human-facing order code, e.g. ``ORD-2026-0042``.

    The sequence comes from ``max(id) + 1`` and is advisory only: it is not
    guaranteed to be unique or gap-free across concurrent writers.
    """
    return f"{REFERENCE_PREFIX}-{year}-{sequence:04d}"


@dataclass(frozen=True)
class OrderItem:
    """A line of an order, frozen at order-creation time.

    References exactly one sellable unit (a variant *or* a bundle).  Price,
    name and SKU are snapshots so later catalog changes never alter
    historical orders.
    """

    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    product_name: str
    sku: str
    seller_id: str
    platform_fee: Money
    seller_amount: Money
    variant_id: str | None = None
    bundle_id: str | None = None
    id: int | None = None

    def __post_init__(self) -> None:
        if (self.variant_id is None) == (self.bundle_id is None):
            raise InvalidRequestError(
                "Order item must reference exactly one of variant or bundle"
            )

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def is_bundle(self) -> bool:
        return self.bundle_id is not None

    @property
    def sellable_id(self) -> str:
        return self.bundle_id if self.bundle_id is not None else self.variant_id  # type: ignore[return-value]


@dataclass(frozen=True)
class StatusHistoryEntry:
    """Append-only record of a status the order entered."""

    status: OrderStatus
    note: str | None
    created_at: datetime


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.place()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    external_ref: str
    customer_id: str
    items: list[OrderItem]
    subtotal: Money
    shipping: Money
    discount: Money
    tax: Money
    status: OrderStatus = OrderStatus.PENDING
    shipping_method_id: str | None = None
    billing_address_id: str | None = None
    shipping_address_id: str | None = None
    placed_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    history: list[StatusHistoryEntry] = field(default_factory=list)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        external_ref: str,
        customer_id: str,
        items: list[OrderItem],
        shipping: Money,
        shipping_method_id: str | None = None,
        billing_address_id: str | None = None,
        shipping_address_id: str | None = None,
        placed_at: datetime | None = None,
    ) -> Order:
        """Create a new pending order, enforcing all invariants."""
        if not customer_id or not str(customer_id).strip():
            raise InvalidRequestError("Customer is required")

        if not items:
            raise InvalidRequestError("Order must contain at least one item")

        subtotal = Money.zero(shipping.currency)
        for item in items:
            subtotal = subtotal + item.line_total

        placed_at = placed_at or _now()
        order = Order(
            id=None,
            external_ref=external_ref,
            customer_id=str(customer_id).strip(),
            items=list(items),
            subtotal=subtotal,
            shipping=shipping,
            discount=Money.zero(shipping.currency),
            tax=Money.zero(shipping.currency),
            shipping_method_id=shipping_method_id,
            billing_address_id=billing_address_id,
            shipping_address_id=shipping_address_id,
            placed_at=placed_at,
            updated_at=placed_at,
        )
        order.history.append(
            StatusHistoryEntry(OrderStatus.PENDING, "Order placed", placed_at)
        )
        return order

    # --- State transitions ----------------------------------------------------

    def record_status(
        self,
        status: OrderStatus,
        note: str | None = None,
        at: datetime | None = None,
    ) -> OrderStatus:
        """Move to ``status`` and append the matching history entry.

        Returns the previous status.  Side effects of a transition
        (fulfilment, releases) are coordinated by the application layer
        *before* calling this.
        """
        at = at or _now()
        previous = self.status
        self.status = status
        self.updated_at = at
        self.history.append(StatusHistoryEntry(status, note, at))
        return previous

    def ensure_cancellable(self) -> None:
        if self.status not in CANCELLABLE_STATUSES:
            raise InvalidStateError(
                "Only pending or processing orders can be cancelled "
                f"(order {self.external_ref} is {self.status.value})"
            )

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        return self.subtotal + self.shipping + self.tax - self.discount

    @property
    def variant_items(self) -> list[OrderItem]:
        return [item for item in self.items if not item.is_bundle]

    @property
    def platform_fee_total(self) -> Money:
        result = Money.zero(self.subtotal.currency)
        for item in self.items:
            result = result + item.platform_fee
        return result
