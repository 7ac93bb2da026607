"""Custom surcharge accumulation."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from invoice_engine.domain.models import Surcharge, TaxRate
from invoice_engine.domain.services.valuation import ZERO, valuer, valuer_tax


@dataclass(frozen=True)
class SurchargeTotals:
    """Totals contributed by the surcharge slots.

    Attributes:
        custom_values: Sum of surcharge values.
        taxes: Tax owed on taxable surcharges.
    """

    custom_values: Decimal
    taxes: Decimal


def accumulate_surcharges(
    surcharges: Sequence[Surcharge],
    tax_rates: Iterable[TaxRate],
    base: Decimal,
    *,
    inclusive: bool = False,
) -> SurchargeTotals:
    """Fold the surcharge slots into value and tax totals.

    Each taxable slot is taxed at every active invoice-level rate. Slots are
    visited in order; the result does not depend on that order.

    Args:
        surcharges: Surcharge slots in slot order.
        tax_rates: Invoice-level tax rates.
        base: Subtotal that percentage surcharges resolve against.
        inclusive: Treat surcharge values as tax-inclusive.

    Returns:
        SurchargeTotals: Accumulated values and taxes.
    """
    rates = [tax.rate for tax in tax_rates if tax.is_active]
    custom_values = ZERO
    taxes = ZERO
    for surcharge in surcharges:
        if surcharge.is_taxable:
            for rate in rates:
                taxes += valuer_tax(surcharge, rate, base, inclusive=inclusive)
        custom_values += valuer(surcharge, base)
    return SurchargeTotals(custom_values=custom_values, taxes=taxes)


__all__ = ["SurchargeTotals", "accumulate_surcharges"]
