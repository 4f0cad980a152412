"""Stroop amounts and prices rendered as fixed 7-decimal strings."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

STROOPS_PER_UNIT = 10_000_000
_SEVEN_PLACES = Decimal("0.0000001")


def format_amount(stroops: int) -> str:
    """100_0000000 -> '100.0000000'; negative amounts keep their sign."""
    stroops = int(stroops)
    sign = "-" if stroops < 0 else ""
    whole, frac = divmod(abs(stroops), STROOPS_PER_UNIT)
    return f"{sign}{whole}.{frac:07d}"


def format_price(numerator: int, denominator: int) -> str:
    """Price n/d as a 7-decimal string; a zero denominator renders as '0.0000000'."""
    if denominator == 0:
        return "0.0000000"
    value = Decimal(numerator) / Decimal(denominator)
    return str(value.quantize(_SEVEN_PLACES, rounding=ROUND_HALF_UP))
