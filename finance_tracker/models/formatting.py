"""
Numeric rounding and formatting helpers shared by the calculation engines.

All monetary and percentage figures leave the engines rounded to two decimal
places with half-up rounding, so that -0.125 becomes -0.12 and 0.125 becomes
0.13 (the same result as ``Math.round(x * 100) / 100`` in JavaScript clients).
"""

import math

from pydantic import BaseModel, Field

MONEY_PLACES = 2


def round_half_up(value: float, places: int = MONEY_PLACES) -> float:
    """
    Round a value to a fixed number of decimal places, ties towards +infinity.

    Args:
        value: The value to round
        places: Number of decimal places to keep

    Returns:
        The rounded value as a float
    """
    factor = 10**places
    scaled = value * factor
    if not math.isfinite(scaled):
        # Too large (or not a number) to carry any decimals.
        return value
    return math.floor(scaled + 0.5) / factor


def safe_rate(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator * 100``, or 0 when the denominator is not positive."""
    if denominator > 0:
        return numerator / denominator * 100
    return 0.0


def percent_change(current: float, previous: float) -> float:
    """
    Period-over-period change in percent.

    A previous value of zero has no meaningful ratio: growth from nothing is
    reported as 100 and anything else as 0.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / abs(previous) * 100


class CurrencyFormatter(BaseModel):
    """Formats currency and percentage values for display."""

    currency_symbol: str = Field(default="$", description="Currency symbol")
    decimal_places: int = Field(
        default=MONEY_PLACES, ge=0, le=10, description="Number of decimal places"
    )

    def format_currency(self, amount: float) -> str:
        """Format an amount as e.g. ``$1,234.56`` (negative as ``-$1,234.56``)."""
        rounded = round_half_up(abs(amount), self.decimal_places)
        sign = "-" if amount < 0 and rounded > 0 else ""
        return f"{sign}{self.currency_symbol}{rounded:,.{self.decimal_places}f}"

    def format_percentage(self, percent: float) -> str:
        """Format a value already expressed in percent, e.g. ``7.00%``."""
        rounded = round_half_up(percent, self.decimal_places)
        return f"{rounded:.{self.decimal_places}f}%"
