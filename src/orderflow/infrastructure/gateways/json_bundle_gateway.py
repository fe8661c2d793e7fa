"""Bundle gateway backed by a local JSON stock ledger.

Bundle stock is pooled: there is one level per bundle and no location.
Composition and the active flag come from the catalog.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from orderflow.domain.exceptions import BundleUnavailableError
from orderflow.domain.gateway.bundle_gateway import BundleGateway
from orderflow.domain.model.inventory import StockLevel
from orderflow.domain.repository.catalog_repository import CatalogRepository
from orderflow.infrastructure.gateways.json_ledger import JsonLedgerStore

logger = structlog.get_logger(__name__)


class JsonBundleGateway(BundleGateway):

    def __init__(self, file_path: Path, catalog_repo: CatalogRepository) -> None:
        self._store = JsonLedgerStore(file_path)
        self._catalog_repo = catalog_repo

    def validate_for_order(self, bundle_id: str, quantity: int) -> None:
        bundle = self._catalog_repo.get_bundle(bundle_id)
        if bundle is None:
            raise BundleUnavailableError(f"Bundle '{bundle_id}' not found")
        if not bundle.is_active:
            raise BundleUnavailableError(f"Bundle '{bundle.sku}' is not active")
        if not bundle.components:
            raise BundleUnavailableError(f"Bundle '{bundle.sku}' has no components")
        available = self._store.load().available(bundle_id)
        if available < quantity:
            raise BundleUnavailableError(
                f"Insufficient stock for bundle '{bundle.sku}' "
                f"(need {quantity}, have {available} available)"
            )

    def reserve(self, bundle_id: str, quantity: int, order_id: int) -> None:
        with self._store.edit() as ledger:
            ledger.reserve(bundle_id, quantity, order_id)
        logger.debug("Bundle reserved", bundle_id=bundle_id, quantity=quantity, order_id=order_id)

    def release(self, bundle_id: str, quantity: int, order_id: int) -> None:
        with self._store.edit() as ledger:
            ledger.release(bundle_id, quantity, order_id)
        logger.debug("Bundle released", bundle_id=bundle_id, quantity=quantity, order_id=order_id)

    def has_reservation(self, bundle_id: str, order_id: int) -> bool:
        return self._store.load().has_reservation(bundle_id, order_id)

    def set_stock(self, bundle_id: str, on_hand: int) -> StockLevel:
        with self._store.edit() as ledger:
            return ledger.set_stock(bundle_id, on_hand)
