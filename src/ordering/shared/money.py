"""Exact decimal helpers for currency amounts.

Amounts are stored on aggregates as canonical two-place decimal text
(``"115.50"``) and converted to ``Decimal`` for arithmetic. Binary floats are
rejected outright so rounding drift cannot creep into order totals.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value) -> Decimal:
    """Convert stored text (or an int/Decimal) into a ``Decimal``."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Currency amounts must not be floats or booleans: {value!r}")
    if isinstance(value, int):
        return Decimal(value)
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a decimal amount: {value!r}") from None


def quantize(amount: Decimal) -> Decimal:
    """Round to whole cents, half-up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value) -> str:
    """Canonical storage form: two decimal places, no exponent."""
    return f"{quantize(to_decimal(value)):.2f}"


def is_amount(value) -> bool:
    """True if ``value`` parses as a finite, non-negative decimal amount."""
    try:
        amount = to_decimal(value)
    except (TypeError, ValueError):
        return False
    return amount.is_finite() and amount >= 0
