"""JSON-file-backed implementation of SellerRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from orderflow.domain.model.seller import FeeType, Seller, SellerCategory
from orderflow.domain.repository.seller_repository import SellerRepository
from orderflow.infrastructure.persistence.json_document import JsonDocument


def _empty() -> dict:
    return {"sellers": {}, "categories": {}}


def _decimal(raw: str | None) -> Decimal | None:
    return Decimal(raw) if raw is not None else None


def _fee_type(raw: str | None) -> FeeType | None:
    return FeeType(raw) if raw is not None else None


class JsonSellerRepository(SellerRepository):

    def __init__(self, file_path: Path) -> None:
        self._document = JsonDocument(file_path, _empty)

    # --- SellerRepository interface -------------------------------------------

    def get_by_id(self, seller_id: str) -> Seller | None:
        raw = self._document.read()["sellers"].get(seller_id)
        if raw is None:
            return None
        return Seller(
            id=raw["id"],
            name=raw["name"],
            category=raw["category"],
            fee_type=_fee_type(raw.get("fee_type")),
            fee_amount=_decimal(raw.get("fee_amount")),
        )

    def get_category(self, code: str) -> SellerCategory | None:
        raw = self._document.read()["categories"].get(code)
        if raw is None:
            return None
        return SellerCategory(
            code=raw["code"],
            default_fee_type=_fee_type(raw.get("default_fee_type")),
            default_fee_amount=_decimal(raw.get("default_fee_amount")),
        )

    def save(self, seller: Seller) -> None:
        with self._document.transaction() as data:
            data["sellers"][seller.id] = {
                "id": seller.id,
                "name": seller.name,
                "category": seller.category,
                "fee_type": seller.fee_type.value if seller.fee_type else None,
                "fee_amount": (
                    str(seller.fee_amount) if seller.fee_amount is not None else None
                ),
            }

    def save_category(self, category: SellerCategory) -> None:
        with self._document.transaction() as data:
            data["categories"][category.code] = {
                "code": category.code,
                "default_fee_type": (
                    category.default_fee_type.value if category.default_fee_type else None
                ),
                "default_fee_amount": (
                    str(category.default_fee_amount)
                    if category.default_fee_amount is not None
                    else None
                ),
            }
