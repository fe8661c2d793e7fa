"""Domain service: Commission Calculator.

Splits a line's revenue between the platform and the seller that
fulfils it.  The fee configuration is the seller's own when complete,
otherwise the default of the seller's category.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

import structlog

from orderflow.domain.model.commission import BulkCommissionResult, CommissionResult
from orderflow.domain.model.seller import CommissionConfig, FeeType
from orderflow.domain.model.value_objects import round_money
from orderflow.domain.repository.seller_repository import SellerRepository

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
NO_COMMISSION = CommissionConfig(FeeType.NONE, ZERO)


class CommissionCalculator:

    def __init__(self, seller_repo: SellerRepository) -> None:
        self._seller_repo = seller_repo

    def calculate(self, line_total: Decimal, seller_id: str) -> CommissionResult:
        """Commission for one line sold by ``seller_id``."""
        if line_total <= ZERO:
            return self.calculate_from_config(line_total, NO_COMMISSION)

        config = self.resolve_config(seller_id)
        result = self.calculate_from_config(line_total, config)
        logger.debug(
            "Commission calculated",
            seller_id=seller_id,
            line_total=str(result.line_total),
            platform_fee=str(result.platform_fee),
            seller_amount=str(result.seller_amount),
        )
        return result

    def resolve_config(self, seller_id: str) -> CommissionConfig:
        seller = self._seller_repo.get_by_id(seller_id)
        if seller is None:
            logger.warning("Seller not found, using zero commission", seller_id=seller_id)
            return NO_COMMISSION

        config = seller.commission_config
        if config.is_complete:
            return config

        category = self._seller_repo.get_category(seller.category)
        if category is None:
            return config
        return category.commission_config

    @staticmethod
    def calculate_from_config(
        line_total: Decimal, config: CommissionConfig
    ) -> CommissionResult:
        """Apply a fee configuration to a line total.

        The platform fee is clamped to ``[0, line_total]`` so a
        misconfigured fixed fee can never leave the seller with a
        negative amount.
        """
        fee_type = config.fee_type or FeeType.NONE
        fee_rate = config.fee_amount if config.fee_amount is not None else ZERO

        if line_total <= ZERO:
            return CommissionResult(
                line_total=line_total,
                platform_fee=round_money(ZERO),
                seller_amount=line_total,
                fee_type=fee_type,
                fee_rate=ZERO,
            )

        if fee_type == FeeType.PERCENTAGE:
            fee = line_total * fee_rate / Decimal("100")
        elif fee_type == FeeType.FIXED:
            fee = fee_rate
        else:
            fee = ZERO

        fee = round_money(min(max(fee, ZERO), line_total))
        return CommissionResult(
            line_total=line_total,
            platform_fee=fee,
            seller_amount=round_money(line_total - fee),
            fee_type=fee_type,
            fee_rate=fee_rate,
        )

    def calculate_bulk(
        self, lines: Iterable[tuple[Decimal, str]]
    ) -> BulkCommissionResult:
        """Commission for many ``(line_total, seller_id)`` pairs, with totals."""
        breakdown = [self.calculate(total, seller_id) for total, seller_id in lines]
        return BulkCommissionResult(
            total_line_total=sum((r.line_total for r in breakdown), ZERO),
            total_platform_fee=sum((r.platform_fee for r in breakdown), ZERO),
            total_seller_amount=sum((r.seller_amount for r in breakdown), ZERO),
            breakdown=breakdown,
        )

    def preview(self, seller_id: str, amount: Decimal) -> CommissionResult:
        """Commission a seller would pay on ``amount``, without placing anything."""
        return self.calculate(amount, seller_id)
