"""Unit tests for the CommissionCalculator domain service."""

from decimal import Decimal

import pytest

from orderflow.domain.model.seller import CommissionConfig, FeeType, Seller, SellerCategory
from orderflow.domain.service.commission_calculator import CommissionCalculator
from tests.fakes import FakeSellerRepository


def _calculator() -> CommissionCalculator:
    repo = FakeSellerRepository(
        sellers=[
            Seller("S-PCT", "Percent Co", "retail", FeeType.PERCENTAGE, Decimal("10")),
            Seller("S-FIX", "Fixed Co", "retail", FeeType.FIXED, Decimal("2.50")),
            Seller("S-NONE", "Free Co", "retail", FeeType.NONE, Decimal("0")),
            Seller("S-DEFAULT", "Default Co", "wholesale"),
            Seller("S-HALF", "Half Co", "wholesale", FeeType.FIXED, None),
            Seller("S-ORPHAN", "Orphan Co", "unknown"),
        ],
        categories=[
            SellerCategory("retail", FeeType.PERCENTAGE, Decimal("5")),
            SellerCategory("wholesale", FeeType.PERCENTAGE, Decimal("7.5")),
        ],
    )
    return CommissionCalculator(repo)


class TestCalculate:

    def test_percentage(self):
        result = _calculator().calculate(Decimal("100.00"), "S-PCT")
        assert result.platform_fee == Decimal("10.00")
        assert result.seller_amount == Decimal("90.00")
        assert result.fee_type == FeeType.PERCENTAGE

    def test_percentage_rounds_half_up(self):
        result = _calculator().calculate(Decimal("0.05"), "S-PCT")
        assert result.platform_fee == Decimal("0.01")
        assert result.seller_amount == Decimal("0.04")

    def test_fixed(self):
        result = _calculator().calculate(Decimal("40.00"), "S-FIX")
        assert result.platform_fee == Decimal("2.50")
        assert result.seller_amount == Decimal("37.50")

    def test_fixed_fee_clamped_to_line_total(self):
        result = _calculator().calculate(Decimal("1.00"), "S-FIX")
        assert result.platform_fee == Decimal("1.00")
        assert result.seller_amount == Decimal("0.00")

    def test_none(self):
        result = _calculator().calculate(Decimal("30.00"), "S-NONE")
        assert result.platform_fee == Decimal("0.00")
        assert result.seller_amount == Decimal("30.00")

    def test_falls_back_to_category_default(self):
        result = _calculator().calculate(Decimal("200.00"), "S-DEFAULT")
        assert result.platform_fee == Decimal("15.00")
        assert result.fee_rate == Decimal("7.5")

    def test_incomplete_seller_config_uses_category(self):
        result = _calculator().calculate(Decimal("100.00"), "S-HALF")
        assert result.fee_type == FeeType.PERCENTAGE
        assert result.platform_fee == Decimal("7.50")

    def test_unknown_seller_pays_nothing(self):
        result = _calculator().calculate(Decimal("100.00"), "S-MISSING")
        assert result.platform_fee == Decimal("0.00")
        assert result.seller_amount == Decimal("100.00")

    def test_seller_without_any_config_pays_nothing(self):
        result = _calculator().calculate(Decimal("100.00"), "S-ORPHAN")
        assert result.platform_fee == Decimal("0.00")

    @pytest.mark.parametrize("total", [Decimal("0"), Decimal("-5")])
    def test_non_positive_total_has_no_fee(self, total):
        result = _calculator().calculate(total, "S-FIX")
        assert result.platform_fee == Decimal("0.00")
        assert result.seller_amount == total

    def test_fee_and_seller_amount_add_up(self):
        result = _calculator().calculate(Decimal("33.33"), "S-PCT")
        assert result.platform_fee + result.seller_amount == Decimal("33.33")


class TestCalculateFromConfig:

    def test_negative_fee_clamped_to_zero(self):
        config = CommissionConfig(FeeType.FIXED, Decimal("-3"))
        result = CommissionCalculator.calculate_from_config(Decimal("10.00"), config)
        assert result.platform_fee == Decimal("0.00")
        assert result.seller_amount == Decimal("10.00")

    def test_missing_type_means_no_fee(self):
        config = CommissionConfig(None, None)
        result = CommissionCalculator.calculate_from_config(Decimal("10.00"), config)
        assert result.fee_type == FeeType.NONE
        assert result.platform_fee == Decimal("0.00")


class TestCalculateBulk:

    def test_totals_across_sellers(self):
        result = _calculator().calculate_bulk([
            (Decimal("100.00"), "S-PCT"),
            (Decimal("40.00"), "S-FIX"),
        ])
        assert result.total_line_total == Decimal("140.00")
        assert result.total_platform_fee == Decimal("12.50")
        assert result.total_seller_amount == Decimal("127.50")
        assert len(result.breakdown) == 2

    def test_empty(self):
        result = _calculator().calculate_bulk([])
        assert result.total_platform_fee == Decimal("0")
        assert result.breakdown == []
