"""Inventory gateway backed by a local JSON stock ledger."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import structlog

from orderflow.domain.gateway.inventory_gateway import InventoryReservationGateway
from orderflow.domain.model.inventory import StockLevel
from orderflow.infrastructure.gateways.json_ledger import JsonLedgerStore

logger = structlog.get_logger(__name__)


class JsonInventoryGateway(InventoryReservationGateway):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonLedgerStore(file_path)

    def find_fulfillment_location(
        self,
        variant_id: str,
        quantity: int,
        claimed: Mapping[str, int] | None = None,
    ) -> str | None:
        return self._store.load().best_location(variant_id, quantity, claimed)

    def reserve(
        self, variant_id: str, location_id: str, quantity: int, order_id: int
    ) -> None:
        with self._store.edit() as ledger:
            ledger.reserve(variant_id, quantity, order_id, location_id)
        logger.debug(
            "Stock reserved",
            variant_id=variant_id,
            location_id=location_id,
            quantity=quantity,
            order_id=order_id,
        )

    def release(
        self, variant_id: str, location_id: str, quantity: int, order_id: int
    ) -> None:
        with self._store.edit() as ledger:
            ledger.release(variant_id, quantity, order_id, location_id)
        logger.debug(
            "Stock released",
            variant_id=variant_id,
            location_id=location_id,
            quantity=quantity,
            order_id=order_id,
        )

    def fulfill(
        self, variant_id: str, location_id: str, quantity: int, order_id: int
    ) -> None:
        with self._store.edit() as ledger:
            ledger.fulfill(variant_id, quantity, order_id, location_id)
        logger.debug(
            "Stock fulfilled",
            variant_id=variant_id,
            location_id=location_id,
            quantity=quantity,
            order_id=order_id,
        )

    def find_reserved_location(self, variant_id: str, order_id: int) -> str | None:
        return self._store.load().reserved_location(variant_id, order_id)

    def fulfilled_quantity(self, variant_id: str, order_id: int) -> int:
        return self._store.load().fulfilled_quantity(variant_id, order_id)

    # --- Stock administration -------------------------------------------------

    def set_stock(self, variant_id: str, location_id: str, on_hand: int) -> StockLevel:
        with self._store.edit() as ledger:
            return ledger.set_stock(variant_id, on_hand, location_id)

    def list_stock(self) -> list[StockLevel]:
        return [lvl for lvl in self._store.load().levels if lvl.location_id is not None]
