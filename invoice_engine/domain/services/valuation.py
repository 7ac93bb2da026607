"""Pure valuation helpers shared by the calculation stages.

None of these helpers validate their inputs or round their results: a
negative rate yields a negative tax, and rounding happens only when the
final totals are assigned. The one exception is an inclusive rate of -100%,
which has no tax portion to extract and raises ``InvalidTaxRateError``.
"""

from decimal import Decimal

from invoice_engine.domain.errors import InvalidTaxRateError
from invoice_engine.domain.models import Surcharge
from invoice_engine.utils.decimal_utils import parse_decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def taxer(base: Decimal, rate: Decimal) -> Decimal:
    """Return the tax owed on ``base`` at ``rate`` percent."""
    return base * (rate or ZERO) / HUNDRED


def inclusive_taxer(base: Decimal, rate: Decimal) -> Decimal:
    """Return the tax portion already contained in ``base``.

    Args:
        base: Tax-inclusive amount.
        rate: Tax rate in percent.

    Returns:
        Decimal: ``base - base / (1 + rate / 100)``.

    Raises:
        InvalidTaxRateError: If ``rate`` is -100, where the divisor is zero.
    """
    if not rate:
        return ZERO
    divisor = 1 + rate / HUNDRED
    if not divisor:
        raise InvalidTaxRateError(
            f"Inclusive tax rate {rate}% leaves no net amount to extract from"
        )
    return base - base / divisor


def valuer(charge, base: Decimal = ZERO) -> Decimal:
    """Return the monetary value of an amount-or-percentage specifier.

    Args:
        charge: A :class:`Surcharge`, a plain numeric amount or None.
        base: Running subtotal that percentage specifiers resolve against.

    Returns:
        Decimal: Absolute value, zero for missing or non-numeric input.
    """
    if isinstance(charge, Surcharge):
        value = parse_decimal(charge.value)
        if value is None:
            return ZERO
        if charge.is_percentage:
            return base * value / HUNDRED
        return value
    value = parse_decimal(charge)
    return ZERO if value is None else value


def valuer_tax(
    charge,
    tax_rate: Decimal,
    base: Decimal = ZERO,
    *,
    inclusive: bool = False,
) -> Decimal:
    """Return the tax owed on a value specifier at ``tax_rate`` percent.

    Args:
        charge: A :class:`Surcharge`, a plain numeric amount or None.
        tax_rate: Tax rate in percent.
        base: Running subtotal for percentage specifiers.
        inclusive: Treat the value as already containing the tax.

    Returns:
        Decimal: Tax amount, zero when the rate or the value is zero.
    """
    value = valuer(charge, base)
    if not tax_rate or not value:
        return ZERO
    if inclusive:
        return inclusive_taxer(value, tax_rate)
    return taxer(value, tax_rate)


__all__ = [
    "ZERO",
    "HUNDRED",
    "taxer",
    "inclusive_taxer",
    "valuer",
    "valuer_tax",
]
