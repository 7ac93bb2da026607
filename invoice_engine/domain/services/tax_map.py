"""Invoice-level tax application and tax map construction."""

from collections.abc import Iterable
from decimal import Decimal

from invoice_engine.domain.constants import TAX_SOURCE_INVOICE, TAX_SOURCE_LINE
from invoice_engine.domain.models import GroupedTax, TaxMapEntry, TaxRate
from invoice_engine.domain.services.valuation import (
    ZERO,
    inclusive_taxer,
    taxer,
)


def apply_invoice_taxes(
    base: Decimal,
    tax_rates: Iterable[TaxRate],
    *,
    inclusive: bool = False,
) -> list[TaxMapEntry]:
    """Compute invoice-level taxes on the running total.

    Slots with a rate of zero or below are skipped and produce no entry.

    Args:
        base: Running total after discount and surcharges.
        tax_rates: Invoice tax slots in slot order.
        inclusive: Extract the tax from ``base`` instead of adding to it.

    Returns:
        list[TaxMapEntry]: One entry per active slot, in slot order.
    """
    compute = inclusive_taxer if inclusive else taxer
    entries = []
    for tax in tax_rates:
        if not tax.is_active:
            continue
        entries.append(
            TaxMapEntry(
                name=tax.label,
                total=compute(base, tax.rate),
                source=TAX_SOURCE_INVOICE,
            )
        )
    return entries


def build_line_tax_map(grouped_taxes: Iterable[GroupedTax]) -> list[TaxMapEntry]:
    """Collapse grouped line taxes into one entry per group key.

    Keys keep the order of their first appearance. Each entry takes the tax
    name of the first row with that key and the sum of all its rows.

    Args:
        grouped_taxes: Line tax rows produced by the line-item aggregator.

    Returns:
        list[TaxMapEntry]: Deduplicated line-level entries.
    """
    names: dict[str, str] = {}
    totals: dict[str, Decimal] = {}
    for row in grouped_taxes:
        if row.key not in names:
            names[row.key] = row.tax_name
            totals[row.key] = ZERO
        totals[row.key] += row.total
    return [
        TaxMapEntry(name=names[key], total=totals[key], source=TAX_SOURCE_LINE)
        for key in names
    ]


def sum_tax_map(entries: Iterable[TaxMapEntry]) -> Decimal:
    """Return the sum of the entry totals."""
    return sum((entry.total for entry in entries), ZERO)


__all__ = ["apply_invoice_taxes", "build_line_tax_map", "sum_tax_map"]
