"""Stock bookkeeping owned by the inventory and bundle gateways.

A StockLevel tracks on-hand and reserved units of one item at one
location.  A StockLedger groups the levels of many items together with the
reservations placed against them, keyed by order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from orderflow.domain.exceptions import (
    InsufficientStockError,
    InvalidRequestError,
    NotReservedError,
)


@dataclass
class StockLevel:
    """Stock of one item at one location.

    Invariants:
    - ``reserved`` can never exceed ``on_hand``
    - ``available`` is always >= 0

    ``location_id`` is ``None`` for pooled stock that has no physical
    location (bundles).
    """

    item_id: str
    on_hand: int
    reserved: int = 0
    location_id: str | None = None

    @property
    def available(self) -> int:
        return self.on_hand - self.reserved

    def reserve(self, quantity: int) -> None:
        """Hold stock for an order.

        Raises InsufficientStockError if not enough stock is available.
        """
        _require_positive(quantity, "Reservation")
        if quantity > self.available:
            raise InsufficientStockError(
                f"Insufficient stock for {self.item_id}{self._where} "
                f"(need {quantity}, have {self.available} available)"
            )
        self.reserved += quantity

    def release(self, quantity: int) -> None:
        """Return previously reserved stock to the available pool."""
        _require_positive(quantity, "Release")
        if quantity > self.reserved:
            raise NotReservedError(
                f"Cannot release {quantity} of {self.item_id}{self._where} "
                f"(only {self.reserved} currently reserved)"
            )
        self.reserved -= quantity

    def fulfill(self, quantity: int) -> None:
        """Permanently deduct shipped stock.

        Both ``on_hand`` and ``reserved`` decrease by the same amount.
        """
        _require_positive(quantity, "Fulfill")
        if quantity > self.reserved:
            raise NotReservedError(
                f"Cannot fulfill {quantity} of {self.item_id}{self._where} "
                f"(only {self.reserved} currently reserved)"
            )
        self.reserved -= quantity
        self.on_hand -= quantity

    def set_on_hand(self, quantity: int) -> None:
        if quantity < self.reserved:
            raise InvalidRequestError(
                f"Cannot set stock of {self.item_id}{self._where} to {quantity} "
                f"({self.reserved} already reserved)"
            )
        self.on_hand = quantity

    @property
    def _where(self) -> str:
        return f" at {self.location_id}" if self.location_id else ""


class ReservationStatus(Enum):
    RESERVED = "reserved"
    FULFILLED = "fulfilled"
    RELEASED = "released"


@dataclass
class Reservation:
    order_id: int
    item_id: str
    quantity: int
    location_id: str | None = None
    status: ReservationStatus = ReservationStatus.RESERVED

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.RESERVED

    def matches(self, order_id: int, item_id: str, location_id: str | None) -> bool:
        return (
            self.order_id == order_id
            and self.item_id == item_id
            and self.location_id == location_id
        )


@dataclass
class StockLedger:
    """Stock levels plus the reservations held against them."""

    levels: list[StockLevel] = field(default_factory=list)
    reservations: list[Reservation] = field(default_factory=list)

    # --- Queries --------------------------------------------------------------

    def level(self, item_id: str, location_id: str | None = None) -> StockLevel | None:
        for level in self.levels:
            if level.item_id == item_id and level.location_id == location_id:
                return level
        return None

    def available(self, item_id: str) -> int:
        return sum(lvl.available for lvl in self.levels if lvl.item_id == item_id)

    def best_location(
        self,
        item_id: str,
        quantity: int,
        claimed: Mapping[str, int] | None = None,
    ) -> str | None:
        """Location holding the most available stock, if it covers ``quantity``.

        ``claimed`` maps location ids to units already promised elsewhere
        (earlier lines of the same order) and is subtracted first.  Ties are
        broken by location id so the choice is deterministic.
        """
        claimed = claimed or {}
        candidates = [
            (lvl.available - claimed.get(lvl.location_id, 0), lvl.location_id)
            for lvl in self.levels
            if lvl.item_id == item_id and lvl.location_id is not None
        ]
        candidates = [c for c in candidates if c[0] >= quantity]
        if not candidates:
            return None
        _, location_id = min(candidates, key=lambda c: (-c[0], c[1]))
        return location_id

    def reserved_location(self, item_id: str, order_id: int) -> str | None:
        for res in self.reservations:
            if res.is_active and res.order_id == order_id and res.item_id == item_id:
                return res.location_id
        return None

    def has_reservation(self, item_id: str, order_id: int) -> bool:
        return any(
            res.is_active and res.order_id == order_id and res.item_id == item_id
            for res in self.reservations
        )

    def fulfilled_quantity(self, item_id: str, order_id: int) -> int:
        return sum(
            res.quantity
            for res in self.reservations
            if res.status == ReservationStatus.FULFILLED
            and res.order_id == order_id
            and res.item_id == item_id
        )

    # --- Mutations ------------------------------------------------------------

    def set_stock(self, item_id: str, on_hand: int, location_id: str | None = None) -> StockLevel:
        if on_hand < 0:
            raise InvalidRequestError("Stock quantity cannot be negative")
        level = self.level(item_id, location_id)
        if level is None:
            level = StockLevel(item_id=item_id, on_hand=on_hand, location_id=location_id)
            self.levels.append(level)
        else:
            level.set_on_hand(on_hand)
        return level

    def reserve(
        self,
        item_id: str,
        quantity: int,
        order_id: int,
        location_id: str | None = None,
    ) -> Reservation:
        level = self.level(item_id, location_id)
        if level is None:
            where = f" at {location_id}" if location_id else ""
            raise InsufficientStockError(f"No stock record for {item_id}{where}")
        level.reserve(quantity)
        reservation = Reservation(
            order_id=order_id,
            item_id=item_id,
            quantity=quantity,
            location_id=location_id,
        )
        self.reservations.append(reservation)
        return reservation

    def release(
        self,
        item_id: str,
        quantity: int,
        order_id: int,
        location_id: str | None = None,
    ) -> None:
        reservation = self._settle(
            item_id, quantity, order_id, location_id, ReservationStatus.RELEASED
        )
        self._level_for(reservation).release(quantity)

    def fulfill(
        self,
        item_id: str,
        quantity: int,
        order_id: int,
        location_id: str | None = None,
    ) -> None:
        reservation = self._settle(
            item_id, quantity, order_id, location_id, ReservationStatus.FULFILLED
        )
        self._level_for(reservation).fulfill(quantity)

    # --- Internal helpers -----------------------------------------------------

    def _settle(
        self,
        item_id: str,
        quantity: int,
        order_id: int,
        location_id: str | None,
        status: ReservationStatus,
    ) -> Reservation:
        """Mark ``quantity`` of an active reservation as released/fulfilled.

        A reservation larger than ``quantity`` is split: the remainder stays
        active and the settled part is recorded as its own entry.
        """
        _require_positive(quantity, status.value.capitalize())
        reservation = next(
            (
                res
                for res in self.reservations
                if res.is_active
                and res.matches(order_id, item_id, location_id)
                and res.quantity >= quantity
            ),
            None,
        )
        if reservation is None:
            where = f" at {location_id}" if location_id else ""
            raise NotReservedError(
                f"No reservation of {quantity} x {item_id}{where} for order #{order_id}"
            )
        if reservation.quantity > quantity:
            reservation.quantity -= quantity
            settled = Reservation(
                order_id=order_id,
                item_id=item_id,
                quantity=quantity,
                location_id=location_id,
                status=status,
            )
            self.reservations.append(settled)
            return settled
        reservation.status = status
        return reservation

    def _level_for(self, reservation: Reservation) -> StockLevel:
        level = self.level(reservation.item_id, reservation.location_id)
        if level is None:
            raise NotReservedError(
                f"Stock record for {reservation.item_id} disappeared while reserved"
            )
        return level


def _require_positive(quantity: int, action: str) -> None:
    if quantity <= 0:
        raise InvalidRequestError(f"{action} quantity must be positive")
