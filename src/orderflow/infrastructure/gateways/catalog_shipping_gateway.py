"""Shipping-rate gateway that prices methods stored in the catalog."""

from __future__ import annotations

from decimal import Decimal

from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.gateway.shipping_gateway import ShippingRateGateway
from orderflow.domain.model.catalog import ShippingMethod
from orderflow.domain.model.value_objects import Money
from orderflow.domain.repository.catalog_repository import CatalogRepository


class CatalogShippingRateGateway(ShippingRateGateway):

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def validate(self, method_id: str) -> ShippingMethod | None:
        return self._catalog_repo.get_shipping_method(method_id)

    def calculate(self, method_id: str, subtotal: Money, weight: Decimal) -> Money:
        method = self._catalog_repo.get_shipping_method(method_id)
        if method is None:
            raise EntityNotFoundError(f"Shipping method '{method_id}' not found")
        return method.cost_for(subtotal, weight)
