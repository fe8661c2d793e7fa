"""Abstract repository for sellers and seller-category fee defaults."""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderflow.domain.model.seller import Seller, SellerCategory


class SellerRepository(ABC):

    @abstractmethod
    def get_by_id(self, seller_id: str) -> Seller | None:
        """Return a seller by its ID, or None if not found."""

    @abstractmethod
    def get_category(self, code: str) -> SellerCategory | None:
        """Return the category holding default fees, or None."""

    @abstractmethod
    def save(self, seller: Seller) -> None:
        """Persist a new or updated seller."""

    @abstractmethod
    def save_category(self, category: SellerCategory) -> None:
        """Persist a new or updated seller category."""
