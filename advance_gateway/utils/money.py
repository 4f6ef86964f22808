"""Currency helpers - amounts are Decimals with two places"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce int/str/float/Decimal to a 2-place Decimal"""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable[Optional[Decimal]]) -> Decimal:
    """Sum amounts, skipping None"""
    return sum((to_money(v) for v in values if v is not None), ZERO)
