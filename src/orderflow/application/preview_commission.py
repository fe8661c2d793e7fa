"""Application service: Preview Commission use case (query).

Shows a seller how a given amount would be split before any order is
placed.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from orderflow.domain.exceptions import InvalidRequestError
from orderflow.domain.service.commission_calculator import CommissionCalculator


@dataclass(frozen=True)
class CommissionPreviewDTO:
    seller_id: str
    line_total: str
    platform_fee: str
    seller_amount: str
    fee_type: str
    fee_rate: str


class PreviewCommissionHandler:

    def __init__(self, commission_calculator: CommissionCalculator) -> None:
        self._commission = commission_calculator

    def handle(self, seller_id: str, amount: str) -> CommissionPreviewDTO:
        try:
            value = Decimal(amount)
        except InvalidOperation as exc:
            raise InvalidRequestError(f"Invalid amount: {amount!r}") from exc

        result = self._commission.preview(seller_id, value)
        return CommissionPreviewDTO(
            seller_id=seller_id,
            line_total=f"{result.line_total:.2f}",
            platform_fee=f"{result.platform_fee:.2f}",
            seller_amount=f"{result.seller_amount:.2f}",
            fee_type=result.fee_type.value,
            fee_rate=str(result.fee_rate),
        )
