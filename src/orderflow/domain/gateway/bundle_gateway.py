"""Port to the bundle subsystem.

Mirrors the inventory gateway's contract for bundle line items; bundle
stock is pooled, so there is no location.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderflow.domain.model.inventory import StockLevel


class BundleGateway(ABC):

    @abstractmethod
    def validate_for_order(self, bundle_id: str, quantity: int) -> None:
        """Check composition and availability.  Raises BundleUnavailableError."""

    @abstractmethod
    def reserve(self, bundle_id: str, quantity: int, order_id: int) -> None:
        """Hold bundle stock for an order.  Raises InsufficientStockError."""

    @abstractmethod
    def release(self, bundle_id: str, quantity: int, order_id: int) -> None:
        """Return held bundle stock.  Raises NotReservedError."""

    @abstractmethod
    def has_reservation(self, bundle_id: str, order_id: int) -> bool:
        """True if the order holds an active reservation of the bundle."""

    @abstractmethod
    def set_stock(self, bundle_id: str, on_hand: int) -> StockLevel:
        """Set the pooled on-hand quantity of a bundle."""
