"""Application service: Load Catalog use case.

Seeds catalog reference data, seller fee configuration and stock from a
single document, e.g. one parsed from a JSON file:

    {
      "variants": [{"id": "V1", "product_name": "Mug", "sku": "MUG-1",
                    "price": "12.50", "seller_id": "S1", "weight": "0.4"}],
      "bundles": [{"id": "B1", "name": "Mug pair", "sku": "MUG-2X",
                   "price": "22.00", "seller_id": "S1",
                   "components": [{"variant_id": "V1", "quantity": 2}]}],
      "shipping_methods": [{"id": "STD", "name": "Standard",
                            "base_rate": "4.99", "rate_per_kg": "1.00",
                            "free_shipping_threshold": "100.00"}],
      "seller_categories": [{"code": "retail", "default_fee_type": "percentage",
                             "default_fee_amount": "10"}],
      "sellers": [{"id": "S1", "name": "Acme", "category": "retail"}],
      "stock": [{"variant_id": "V1", "location_id": "WH-1", "quantity": 40}],
      "bundle_stock": [{"bundle_id": "B1", "quantity": 5}]
    }

Every section is optional.  Existing records with the same ID are replaced.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from orderflow.domain.exceptions import InvalidRequestError
from orderflow.domain.gateway.bundle_gateway import BundleGateway
from orderflow.domain.gateway.inventory_gateway import InventoryReservationGateway
from orderflow.domain.model.catalog import Bundle, BundleComponent, ShippingMethod, Variant
from orderflow.domain.model.seller import FeeType, Seller, SellerCategory
from orderflow.domain.model.value_objects import Money
from orderflow.domain.repository.catalog_repository import CatalogRepository
from orderflow.domain.repository.seller_repository import SellerRepository


@dataclass(frozen=True)
class LoadSummaryDTO:
    variants: int = 0
    bundles: int = 0
    shipping_methods: int = 0
    sellers: int = 0
    seller_categories: int = 0
    stock_levels: int = 0


class LoadCatalogHandler:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        seller_repo: SellerRepository,
        inventory_gateway: InventoryReservationGateway,
        bundle_gateway: BundleGateway,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._seller_repo = seller_repo
        self._inventory = inventory_gateway
        self._bundles = bundle_gateway

    def handle(self, document: dict) -> LoadSummaryDTO:
        try:
            return self._load(document)
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidRequestError(f"Malformed catalog document: {exc!r}") from exc

    def _load(self, document: dict) -> LoadSummaryDTO:
        categories = document.get("seller_categories", [])
        for raw in categories:
            self._seller_repo.save_category(
                SellerCategory(
                    code=raw["code"],
                    default_fee_type=FeeType.parse(raw.get("default_fee_type")),
                    default_fee_amount=_decimal_or_none(raw.get("default_fee_amount")),
                )
            )

        sellers = document.get("sellers", [])
        for raw in sellers:
            self._seller_repo.save(
                Seller(
                    id=str(raw["id"]),
                    name=raw.get("name", str(raw["id"])),
                    category=raw.get("category", ""),
                    fee_type=FeeType.parse(raw.get("fee_type")),
                    fee_amount=_decimal_or_none(raw.get("fee_amount")),
                )
            )

        variants = document.get("variants", [])
        for raw in variants:
            self._catalog_repo.save_variant(
                Variant(
                    id=str(raw["id"]),
                    product_name=raw["product_name"],
                    sku=raw["sku"],
                    price=Money.of(raw["price"]),
                    seller_id=str(raw["seller_id"]),
                    weight=_decimal(raw.get("weight", "0")),
                )
            )

        bundles = document.get("bundles", [])
        for raw in bundles:
            self._catalog_repo.save_bundle(
                Bundle(
                    id=str(raw["id"]),
                    name=raw["name"],
                    sku=raw["sku"],
                    price=Money.of(raw["price"]),
                    seller_id=str(raw["seller_id"]),
                    weight=_decimal(raw.get("weight", "0")),
                    is_active=bool(raw.get("is_active", True)),
                    components=[
                        BundleComponent(str(c["variant_id"]), int(c["quantity"]))
                        for c in raw.get("components", [])
                    ],
                )
            )

        methods = document.get("shipping_methods", [])
        for raw in methods:
            threshold = raw.get("free_shipping_threshold")
            self._catalog_repo.save_shipping_method(
                ShippingMethod(
                    id=str(raw["id"]),
                    name=raw["name"],
                    base_rate=Money.of(raw.get("base_rate", "0")),
                    rate_per_kg=Money.of(raw.get("rate_per_kg", "0")),
                    is_active=bool(raw.get("is_active", True)),
                    free_shipping_threshold=Money.of(threshold) if threshold is not None else None,
                )
            )

        stock = document.get("stock", [])
        for raw in stock:
            self._inventory.set_stock(
                str(raw["variant_id"]), str(raw["location_id"]), int(raw["quantity"])
            )
        bundle_stock = document.get("bundle_stock", [])
        for raw in bundle_stock:
            self._bundles.set_stock(str(raw["bundle_id"]), int(raw["quantity"]))

        return LoadSummaryDTO(
            variants=len(variants),
            bundles=len(bundles),
            shipping_methods=len(methods),
            sellers=len(sellers),
            seller_categories=len(categories),
            stock_levels=len(stock) + len(bundle_stock),
        )


def _decimal(raw) -> Decimal:
    try:
        return Decimal(str(raw))
    except InvalidOperation as exc:
        raise InvalidRequestError(f"Invalid number: {raw!r}") from exc


def _decimal_or_none(raw) -> Decimal | None:
    return None if raw is None else _decimal(raw)
