"""Helpers for Decimal normalization and money rounding."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from JSON, SQL or callers.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def parse_decimal(value) -> Decimal | None:
    """Parse a numeric value, returning None when it is not numeric.

    Booleans and non-finite values are rejected as well.

    Args:
        value: Raw value to parse.

    Returns:
        Decimal | None: Parsed value, or None for missing or non-numeric input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        parsed = coerce_decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def round_money(value, precision: int) -> Decimal:
    """Round a monetary value half-up to ``precision`` decimal places.

    Args:
        value: Value to round.
        precision: Number of decimal places.

    Returns:
        Decimal: Rounded value.
    """
    quantum = Decimal(1).scaleb(-precision)
    return coerce_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def format_rate(rate: Decimal) -> str:
    """Render a percentage rate without trailing zeros (``10.00`` -> ``10``)."""
    normalized = coerce_decimal(rate).normalize()
    return format(normalized, "f")


__all__ = ["coerce_decimal", "parse_decimal", "round_money", "format_rate"]
