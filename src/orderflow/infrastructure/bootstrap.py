"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from orderflow.application.load_catalog import LoadCatalogHandler
from orderflow.application.orchestrator import OrderOrchestrator
from orderflow.application.preview_commission import PreviewCommissionHandler
from orderflow.application.set_inventory import SetStockHandler
from orderflow.application.show_inventory import ShowInventoryHandler
from orderflow.domain.service.commission_calculator import CommissionCalculator
from orderflow.infrastructure.config import Settings
from orderflow.infrastructure.event_bus import InMemoryEventBus
from orderflow.infrastructure.gateways.catalog_shipping_gateway import CatalogShippingRateGateway
from orderflow.infrastructure.gateways.json_bundle_gateway import JsonBundleGateway
from orderflow.infrastructure.gateways.json_inventory_gateway import JsonInventoryGateway
from orderflow.infrastructure.listeners import register_listeners
from orderflow.infrastructure.persistence.json_catalog_repository import JsonCatalogRepository
from orderflow.infrastructure.persistence.json_order_repository import JsonOrderRepository
from orderflow.infrastructure.persistence.json_seller_repository import JsonSellerRepository


def order_repository(settings: Settings) -> JsonOrderRepository:
    return JsonOrderRepository(settings.orders_file)


def catalog_repository(settings: Settings) -> JsonCatalogRepository:
    return JsonCatalogRepository(settings.catalog_file)


def seller_repository(settings: Settings) -> JsonSellerRepository:
    return JsonSellerRepository(settings.sellers_file)


def inventory_gateway(settings: Settings) -> JsonInventoryGateway:
    return JsonInventoryGateway(settings.inventory_file)


def bundle_gateway(settings: Settings) -> JsonBundleGateway:
    return JsonBundleGateway(settings.bundle_stock_file, catalog_repository(settings))


def event_bus() -> InMemoryEventBus:
    bus = InMemoryEventBus()
    register_listeners(bus)
    return bus


def order_orchestrator(settings: Settings) -> OrderOrchestrator:
    catalog = catalog_repository(settings)
    return OrderOrchestrator(
        order_repo=order_repository(settings),
        catalog_repo=catalog,
        inventory_gateway=inventory_gateway(settings),
        bundle_gateway=JsonBundleGateway(settings.bundle_stock_file, catalog),
        shipping_gateway=CatalogShippingRateGateway(catalog),
        commission_calculator=CommissionCalculator(seller_repository(settings)),
        event_bus=event_bus(),
    )


def set_stock_handler(settings: Settings) -> SetStockHandler:
    return SetStockHandler(
        inventory_gateway=inventory_gateway(settings),
        bundle_gateway=bundle_gateway(settings),
        catalog_repo=catalog_repository(settings),
    )


def show_inventory_handler(settings: Settings) -> ShowInventoryHandler:
    return ShowInventoryHandler(
        inventory_gateway=inventory_gateway(settings),
        catalog_repo=catalog_repository(settings),
    )


def load_catalog_handler(settings: Settings) -> LoadCatalogHandler:
    catalog = catalog_repository(settings)
    return LoadCatalogHandler(
        catalog_repo=catalog,
        seller_repo=seller_repository(settings),
        inventory_gateway=inventory_gateway(settings),
        bundle_gateway=JsonBundleGateway(settings.bundle_stock_file, catalog),
    )


def preview_commission_handler(settings: Settings) -> PreviewCommissionHandler:
    return PreviewCommissionHandler(CommissionCalculator(seller_repository(settings)))
