"""JSON-file-backed implementation of CatalogRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from orderflow.domain.model.catalog import Bundle, BundleComponent, ShippingMethod, Variant
from orderflow.domain.model.value_objects import Money
from orderflow.domain.repository.catalog_repository import CatalogRepository
from orderflow.infrastructure.persistence.json_document import JsonDocument


def _empty() -> dict:
    return {"variants": {}, "bundles": {}, "shipping_methods": {}}


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, file_path: Path) -> None:
        self._document = JsonDocument(file_path, _empty)

    # --- CatalogRepository interface ------------------------------------------

    def get_variant(self, variant_id: str) -> Variant | None:
        raw = self._document.read()["variants"].get(variant_id)
        return self._variant_to_domain(raw) if raw else None

    def get_bundle(self, bundle_id: str) -> Bundle | None:
        raw = self._document.read()["bundles"].get(bundle_id)
        return self._bundle_to_domain(raw) if raw else None

    def get_shipping_method(self, method_id: str) -> ShippingMethod | None:
        raw = self._document.read()["shipping_methods"].get(method_id)
        return self._method_to_domain(raw) if raw else None

    def save_variant(self, variant: Variant) -> None:
        with self._document.transaction() as data:
            data["variants"][variant.id] = {
                "id": variant.id,
                "product_name": variant.product_name,
                "sku": variant.sku,
                "price": str(variant.price.amount),
                "currency": variant.price.currency,
                "seller_id": variant.seller_id,
                "weight": str(variant.weight),
            }

    def save_bundle(self, bundle: Bundle) -> None:
        with self._document.transaction() as data:
            data["bundles"][bundle.id] = {
                "id": bundle.id,
                "name": bundle.name,
                "sku": bundle.sku,
                "price": str(bundle.price.amount),
                "currency": bundle.price.currency,
                "seller_id": bundle.seller_id,
                "weight": str(bundle.weight),
                "is_active": bundle.is_active,
                "components": [
                    {"variant_id": c.variant_id, "quantity": c.quantity}
                    for c in bundle.components
                ],
            }

    def save_shipping_method(self, method: ShippingMethod) -> None:
        threshold = method.free_shipping_threshold
        with self._document.transaction() as data:
            data["shipping_methods"][method.id] = {
                "id": method.id,
                "name": method.name,
                "base_rate": str(method.base_rate.amount),
                "rate_per_kg": str(method.rate_per_kg.amount),
                "currency": method.base_rate.currency,
                "is_active": method.is_active,
                "free_shipping_threshold": (
                    str(threshold.amount) if threshold is not None else None
                ),
            }

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _variant_to_domain(raw: dict) -> Variant:
        return Variant(
            id=raw["id"],
            product_name=raw["product_name"],
            sku=raw["sku"],
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            seller_id=raw["seller_id"],
            weight=Decimal(raw.get("weight", "0")),
        )

    @staticmethod
    def _bundle_to_domain(raw: dict) -> Bundle:
        return Bundle(
            id=raw["id"],
            name=raw["name"],
            sku=raw["sku"],
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            seller_id=raw["seller_id"],
            weight=Decimal(raw.get("weight", "0")),
            is_active=raw.get("is_active", True),
            components=[
                BundleComponent(c["variant_id"], c["quantity"])
                for c in raw.get("components", [])
            ],
        )

    @staticmethod
    def _method_to_domain(raw: dict) -> ShippingMethod:
        currency = raw.get("currency", "USD")
        threshold = raw.get("free_shipping_threshold")
        return ShippingMethod(
            id=raw["id"],
            name=raw["name"],
            base_rate=Money(Decimal(raw["base_rate"]), currency),
            rate_per_kg=Money(Decimal(raw["rate_per_kg"]), currency),
            is_active=raw.get("is_active", True),
            free_shipping_threshold=(
                Money(Decimal(threshold), currency) if threshold is not None else None
            ),
        )
