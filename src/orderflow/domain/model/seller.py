"""Sellers and their platform-fee configuration."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from orderflow.domain.exceptions import InvalidRequestError


class FeeType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    NONE = "none"

    @staticmethod
    def parse(raw: str | None) -> FeeType | None:
        if raw is None or raw == "":
            return None
        try:
            return FeeType(raw.lower())
        except ValueError as exc:
            raise InvalidRequestError(f"Unknown fee type '{raw}'") from exc


@dataclass(frozen=True)
class CommissionConfig:
    """How the platform takes its cut from a seller's line total.

    ``fee_amount`` is a rate in percent for ``PERCENTAGE`` and a flat
    amount for ``FIXED``.
    """

    fee_type: FeeType | None
    fee_amount: Decimal | None

    @property
    def is_complete(self) -> bool:
        return self.fee_type is not None and self.fee_amount is not None


@dataclass
class SellerCategory:
    """Default fee configuration shared by every seller of a category."""

    code: str
    default_fee_type: FeeType | None = None
    default_fee_amount: Decimal | None = None

    @property
    def commission_config(self) -> CommissionConfig:
        return CommissionConfig(self.default_fee_type, self.default_fee_amount)


@dataclass
class Seller:
    id: str
    name: str
    category: str
    fee_type: FeeType | None = None
    fee_amount: Decimal | None = None

    @property
    def commission_config(self) -> CommissionConfig:
        """The seller's own configuration, possibly incomplete."""
        return CommissionConfig(self.fee_type, self.fee_amount)
