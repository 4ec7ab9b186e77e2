"""
Tests for SavingsCalculator.summarize
"""
from decimal import Decimal

import pytest

from grocery_compare.schemas.comparison import StorePriceBreakdown
from grocery_compare.services.savings_calculator import SavingsCalculator, WEEKS_PER_YEAR


def _breakdown(store_id: int, total: str, savings: str) -> StorePriceBreakdown:
    return StorePriceBreakdown(
        store_id=store_id,
        name=f"Store {store_id}",
        chain="TestChain",
        distance=Decimal("1"),
        total_price=Decimal(total),
        savings=Decimal(savings),
        items_total=0,
        items_available=0,
        price_details=[],
    )


@pytest.mark.unit
class TestSavingsCalculator:

    def test_summary_from_breakdowns(self):
        summary = SavingsCalculator.summarize([
            _breakdown(1, "40.00", "5.00"),
            _breakdown(2, "50.00", "1.00"),
        ])

        assert summary.best_savings == Decimal("5.00")
        assert summary.highest_price == Decimal("50.00")
        assert summary.savings_percentage == Decimal("10")
        assert summary.display_percentage == Decimal("10")
        assert summary.annual_savings == Decimal("260.00")

    def test_annual_savings_uses_weekly_cadence(self):
        summary = SavingsCalculator.summarize([_breakdown(1, "10.00", "0.50")])

        assert WEEKS_PER_YEAR == 52
        assert summary.annual_savings == Decimal("26.00")

    def test_empty_breakdowns(self):
        summary = SavingsCalculator.summarize([])

        assert summary.best_savings == Decimal("0")
        assert summary.highest_price == Decimal("0")
        assert summary.savings_percentage == Decimal("0")
        assert summary.annual_savings == Decimal("0")

    def test_zero_totals_do_not_divide(self):
        summary = SavingsCalculator.summarize([_breakdown(1, "0", "0"), _breakdown(2, "0", "0")])

        assert summary.savings_percentage == Decimal("0")
        assert summary.display_percentage == Decimal("0")

    def test_display_percentage_clamped_to_100(self):
        summary = SavingsCalculator.summarize([_breakdown(1, "2.00", "3.00")])

        assert summary.savings_percentage == Decimal("150")
        assert summary.display_percentage == Decimal("100")
