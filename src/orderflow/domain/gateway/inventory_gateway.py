"""Port to the inventory subsystem that owns physical stock.

The orchestrator treats inventory as a remote resource manager: it never
touches stock counters itself, it only asks the gateway to find, reserve,
release and fulfill stock on behalf of an order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from orderflow.domain.model.inventory import StockLevel


class InventoryReservationGateway(ABC):

    @abstractmethod
    def find_fulfillment_location(
        self,
        variant_id: str,
        quantity: int,
        claimed: Mapping[str, int] | None = None,
    ) -> str | None:
        """Return a location that can ship ``quantity`` units, or None.

        ``claimed`` holds units per location already set aside for earlier
        lines of the same order.
        """

    @abstractmethod
    def reserve(
        self, variant_id: str, location_id: str, quantity: int, order_id: int
    ) -> None:
        """Hold stock for an order.  Raises InsufficientStockError."""

    @abstractmethod
    def release(
        self, variant_id: str, location_id: str, quantity: int, order_id: int
    ) -> None:
        """Return held stock.  Raises NotReservedError."""

    @abstractmethod
    def fulfill(
        self, variant_id: str, location_id: str, quantity: int, order_id: int
    ) -> None:
        """Turn a hold into a permanent decrement.  Raises NotReservedError."""

    @abstractmethod
    def find_reserved_location(self, variant_id: str, order_id: int) -> str | None:
        """Return the location of an active reservation for the order, or None."""

    @abstractmethod
    def fulfilled_quantity(self, variant_id: str, order_id: int) -> int:
        """Units of the variant already fulfilled for the order."""

    # --- Stock administration -------------------------------------------------

    @abstractmethod
    def set_stock(self, variant_id: str, location_id: str, on_hand: int) -> StockLevel:
        """Set the on-hand quantity of a variant at a location."""

    @abstractmethod
    def list_stock(self) -> list[StockLevel]:
        """Return every stock level."""
