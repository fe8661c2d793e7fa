"""Port to the shipping-rate subsystem."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from orderflow.domain.model.catalog import ShippingMethod
from orderflow.domain.model.value_objects import Money


class ShippingRateGateway(ABC):

    @abstractmethod
    def validate(self, method_id: str) -> ShippingMethod | None:
        """Return the shipping method (active or not), or None if absent."""

    @abstractmethod
    def calculate(self, method_id: str, subtotal: Money, weight: Decimal) -> Money:
        """Return the shipping cost for an order of ``subtotal`` and ``weight``."""
