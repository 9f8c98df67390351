"""Amount conversion between platform and Razorpay units.

The platform speaks decimal major units (rupees), Razorpay integer minor
units (paise).
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

MINOR_UNITS_PER_MAJOR = 100

# Largest major-unit amount accepted from the platform
MAX_MAJOR_AMOUNT = Decimal("1000000000000")

_WHOLE = Decimal("1")


def to_minor_units(amount: Union[Decimal, int, float, str]) -> int:
    """Convert a major-unit amount to integer minor units.

    Rounds half-up to the nearest integer.

    Args:
        amount: Amount in major units (e.g. Decimal("2.00")).

    Returns:
        Amount in minor units (e.g. 200).
    """
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value * MINOR_UNITS_PER_MAJOR).quantize(_WHOLE, rounding=ROUND_HALF_UP))


def to_major_units(amount_minor: int) -> float:
    """Convert integer minor units back to a major-unit float (no rounding)."""
    return amount_minor / MINOR_UNITS_PER_MAJOR


def is_accepted_amount(amount: Decimal) -> bool:
    """True for finite amounts no larger than MAX_MAJOR_AMOUNT in magnitude."""
    return amount.is_finite() and abs(amount) <= MAX_MAJOR_AMOUNT


def as_wire_amount(amount: Union[Decimal, None]) -> float:
    """Present a request amount on the wire; missing or unrenderable amounts become 0."""
    if amount is None:
        return 0.0
    value = float(amount)
    if not math.isfinite(value):
        return 0.0
    return value
