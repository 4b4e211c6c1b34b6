"""Decimal helpers for currency amounts.

Amounts are stored as floats on aggregates but every computation goes through
``Decimal`` with explicit half-up rounding to two places.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """Convert a stored amount (float, int, str, Decimal or None) to Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps the shortest repr of a float, so 19.99 stays 19.99
    return Decimal(str(value))


def round_half_up(value, places: int = 2) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def as_amount(value) -> float:
    """Round half-up to cents and return the float representation for storage."""
    return float(round_half_up(value))


def order_total(subtotal, tax_amount, shipping_cost, discount_amount) -> Decimal:
    return round_half_up(
        to_decimal(subtotal) + to_decimal(tax_amount) + to_decimal(shipping_cost) - to_decimal(discount_amount)
    )


def line_total(unit_price, quantity, discount_percentage) -> Decimal:
    gross = to_decimal(unit_price) * Decimal(quantity)
    return round_half_up(gross * (1 - to_decimal(discount_percentage) / HUNDRED))
