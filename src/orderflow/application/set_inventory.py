"""Application service: Set Stock use case."""

from __future__ import annotations

from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.gateway.bundle_gateway import BundleGateway
from orderflow.domain.gateway.inventory_gateway import InventoryReservationGateway
from orderflow.domain.repository.catalog_repository import CatalogRepository


class SetStockHandler:

    def __init__(
        self,
        inventory_gateway: InventoryReservationGateway,
        bundle_gateway: BundleGateway,
        catalog_repo: CatalogRepository,
    ) -> None:
        self._inventory = inventory_gateway
        self._bundles = bundle_gateway
        self._catalog_repo = catalog_repo

    def handle_variant(self, variant_id: str, location_id: str, quantity: int) -> None:
        """Set the on-hand quantity of a variant at one location."""
        if self._catalog_repo.get_variant(variant_id) is None:
            raise EntityNotFoundError(f"Variant '{variant_id}' not found")
        self._inventory.set_stock(variant_id, location_id, quantity)

    def handle_bundle(self, bundle_id: str, quantity: int) -> None:
        """Set the pooled on-hand quantity of a bundle."""
        if self._catalog_repo.get_bundle(bundle_id) is None:
            raise EntityNotFoundError(f"Bundle '{bundle_id}' not found")
        self._bundles.set_stock(bundle_id, quantity)
