"""Abstract repository for catalog reference data.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderflow.domain.model.catalog import Bundle, ShippingMethod, Variant


class CatalogRepository(ABC):

    @abstractmethod
    def get_variant(self, variant_id: str) -> Variant | None:
        """Return a variant by its ID, or None if not found."""

    @abstractmethod
    def get_bundle(self, bundle_id: str) -> Bundle | None:
        """Return a bundle by its ID, or None if not found."""

    @abstractmethod
    def get_shipping_method(self, method_id: str) -> ShippingMethod | None:
        """Return a shipping method by its ID, or None if not found."""

    @abstractmethod
    def save_variant(self, variant: Variant) -> None:
        """Persist a new or updated variant."""

    @abstractmethod
    def save_bundle(self, bundle: Bundle) -> None:
        """Persist a new or updated bundle."""

    @abstractmethod
    def save_shipping_method(self, method: ShippingMethod) -> None:
        """Persist a new or updated shipping method."""
