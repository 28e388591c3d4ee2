"""Monetary helpers shared by the pricing formulas."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0")


def round2(amount: Decimal) -> Decimal:
    """Round to cents, half-up (2.345 -> 2.35)."""
    return finite_or_zero(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def finite_or_zero(amount: Decimal) -> Decimal:
    """Replace NaN or Infinity with zero so no garbage figure reaches a caller."""
    if not amount.is_finite():
        return ZERO
    return amount


def floor_at_zero(amount: Decimal) -> Decimal:
    return max(ZERO, finite_or_zero(amount))


def to_decimal(value: object) -> Decimal:
    """Convert a raw number or string to Decimal.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1"), not its binary
    expansion. Unparseable values become zero.

    Args:
        value: int, float, str, Decimal or None.

    Returns:
        Finite Decimal value.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return finite_or_zero(value)
    try:
        amount = Decimal(str(value).strip().replace("$", "").replace(",", ""))
    except InvalidOperation:
        return ZERO
    return finite_or_zero(amount)


def clamp_non_negative(value: object) -> Decimal:
    """Convert to Decimal, treating negatives as zero."""
    return max(ZERO, to_decimal(value))
