"""Catalog reference data the orchestrator reads but never owns.

Variants and bundles are the two kinds of sellable unit an order line can
point at.  Shipping methods are looked up by the shipping-rate gateway.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from orderflow.domain.model.value_objects import Money


@dataclass
class Variant:
    """A concrete, stock-keeping variation of a product."""

    id: str
    product_name: str
    sku: str
    price: Money
    seller_id: str
    weight: Decimal = Decimal("0")  # kilograms per unit


@dataclass(frozen=True)
class BundleComponent:
    variant_id: str
    quantity: int


@dataclass
class Bundle:
    """A set of variants sold together under one price and SKU."""

    id: str
    name: str
    sku: str
    price: Money
    seller_id: str
    weight: Decimal = Decimal("0")
    is_active: bool = True
    components: list[BundleComponent] = field(default_factory=list)


@dataclass
class ShippingMethod:
    """A selectable shipping option.

    Cost is ``base_rate + rate_per_kg * weight``, waived entirely once the
    order subtotal reaches ``free_shipping_threshold`` (when set).
    """

    id: str
    name: str
    base_rate: Money
    rate_per_kg: Money
    is_active: bool = True
    free_shipping_threshold: Money | None = None

    def cost_for(self, subtotal: Money, weight: Decimal) -> Money:
        if (
            self.free_shipping_threshold is not None
            and subtotal >= self.free_shipping_threshold
        ):
            return Money.zero(subtotal.currency)
        return (self.base_rate + self.rate_per_kg.scaled(weight)).rounded()
