"""Domain services package."""

from .balance import ResolvedBalance, resolve_balance, resolve_partial
from .discount import discount
from .line_items import LineItemSum, group_key
from .pipeline import (
    CalculationContext,
    Stage,
    calculate_balance,
    calculate_custom_values,
    calculate_discount,
    calculate_invoice_taxes,
    calculate_line_items,
    calculate_partial,
    calculate_tax_map,
    calculate_totals,
    to_result,
)
from .surcharges import SurchargeTotals, accumulate_surcharges
from .tax_map import apply_invoice_taxes, build_line_tax_map, sum_tax_map
from .validation import validate_invoice, validate_tax_rate
from .valuation import inclusive_taxer, taxer, valuer, valuer_tax

__all__ = [
    "ResolvedBalance",
    "resolve_balance",
    "resolve_partial",
    "discount",
    "LineItemSum",
    "group_key",
    "CalculationContext",
    "Stage",
    "calculate_line_items",
    "calculate_discount",
    "calculate_custom_values",
    "calculate_invoice_taxes",
    "calculate_tax_map",
    "calculate_totals",
    "calculate_balance",
    "calculate_partial",
    "to_result",
    "SurchargeTotals",
    "accumulate_surcharges",
    "apply_invoice_taxes",
    "build_line_tax_map",
    "sum_tax_map",
    "validate_invoice",
    "validate_tax_rate",
    "inclusive_taxer",
    "taxer",
    "valuer",
    "valuer_tax",
]
