"""Fixed-point currency helpers.

Every stored amount is a Decimal with two fractional digits. Inputs may be
strings, ints, floats or Decimals; floats go through ``str()`` so that
``0.1`` becomes ``Decimal("0.1")`` rather than its binary expansion.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Optional[Number]) -> Decimal:
    """Coerce *value* to a two-place Decimal. ``None`` counts as zero."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity: int, unit_price: Number) -> Decimal:
    return to_money(Decimal(quantity) * to_money(unit_price))


def net_total(base: Number, tax: Optional[Number] = None, discount: Optional[Number] = None) -> Decimal:
    """``base + tax - discount``, used for payment totals and invoice grand totals."""
    return to_money(to_money(base) + to_money(tax) - to_money(discount))
