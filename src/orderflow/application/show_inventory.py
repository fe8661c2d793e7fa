"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from orderflow.domain.gateway.inventory_gateway import InventoryReservationGateway
from orderflow.domain.repository.catalog_repository import CatalogRepository


@dataclass(frozen=True)
class StockLineDTO:
    variant_id: str
    sku: str
    location_id: str
    on_hand: int
    reserved: int
    available: int


class ShowInventoryHandler:

    def __init__(
        self,
        inventory_gateway: InventoryReservationGateway,
        catalog_repo: CatalogRepository,
    ) -> None:
        self._inventory = inventory_gateway
        self._catalog_repo = catalog_repo

    def handle(self) -> list[StockLineDTO]:
        lines = []
        for level in self._inventory.list_stock():
            variant = self._catalog_repo.get_variant(level.item_id)
            lines.append(
                StockLineDTO(
                    variant_id=level.item_id,
                    sku=variant.sku if variant else "?",
                    location_id=level.location_id or "-",
                    on_hand=level.on_hand,
                    reserved=level.reserved,
                    available=level.available,
                )
            )
        return sorted(lines, key=lambda line: (line.variant_id, line.location_id))
