from __future__ import annotations

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Any

MONEY = Decimal("0.01")
WHOLE = Decimal("1")
HALF = Decimal("0.5")
ZERO = Decimal("0")


def D(value: Any) -> Decimal:
    """Decimal from a config scalar. Floats go through str() so 1.15 stays 1.15."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def qmoney(x: Decimal) -> Decimal:
    return D(x).quantize(MONEY, rounding=ROUND_HALF_UP)


def round_whole(x: Decimal) -> Decimal:
    """
    Whole currency units, half toward +inf.
    Used for display figures (receipt breakdown, promo savings), so -22.5 -> -22.
    """
    return (D(x) + HALF).to_integral_value(rounding=ROUND_FLOOR)


def to_minor_units(x: Decimal) -> int:
    # payment gateway wants paise
    return int(round_whole(D(x) * 100))
