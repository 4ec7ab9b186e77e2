"""
Savings summary for a ranked comparison.
"""

from decimal import Decimal
from typing import Sequence

from grocery_compare.schemas.comparison import StorePriceBreakdown, SavingsSummary

# Weekly shopping cadence; a fixed assumption, not a forecast
WEEKS_PER_YEAR = 52

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class SavingsCalculator:
    """Derives headline savings figures from per-store breakdowns"""

    @staticmethod
    def summarize(breakdowns: Sequence[StorePriceBreakdown]) -> SavingsSummary:
        """
        Best single-store saving, its share of the most expensive store's total,
        and the yearly figure for weekly shopping.

        savings_percentage is kept raw; display_percentage is clamped to [0, 100].
        """
        best_savings = max((b.savings for b in breakdowns), default=ZERO)
        highest_price = max((b.total_price for b in breakdowns), default=ZERO)

        if highest_price > 0:
            savings_percentage = best_savings / highest_price * HUNDRED
        else:
            savings_percentage = ZERO

        display_percentage = min(max(savings_percentage, ZERO), HUNDRED)

        return SavingsSummary(
            best_savings=best_savings,
            highest_price=highest_price,
            savings_percentage=savings_percentage,
            display_percentage=display_percentage,
            annual_savings=best_savings * WEEKS_PER_YEAR,
        )
