"""Results of splitting a line's revenue between platform and seller."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from orderflow.domain.model.seller import FeeType


@dataclass(frozen=True)
class CommissionResult:
    line_total: Decimal
    platform_fee: Decimal
    seller_amount: Decimal
    fee_type: FeeType
    fee_rate: Decimal


@dataclass(frozen=True)
class BulkCommissionResult:
    total_line_total: Decimal
    total_platform_fee: Decimal
    total_seller_amount: Decimal
    breakdown: list[CommissionResult]
