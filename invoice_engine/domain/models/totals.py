"""Domain models for computed invoice totals."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class GroupedTax:
    """Line-level tax amount tagged with its tax-rate group key."""

    key: str
    tax_name: str
    total: Decimal


@dataclass(frozen=True)
class TaxMapEntry:
    """Named tax total in the tax map.

    Attributes:
        name: Display name, e.g. ``"VAT 20%"``.
        total: Tax amount at full precision.
        source: ``"invoice"`` for invoice-level taxes, ``"line"`` for
            grouped line taxes.
    """

    name: str
    total: Decimal
    source: str


@dataclass(frozen=True)
class ComputationResult:
    """Totals produced by one build of an invoice.

    Attributes:
        sub_total: Sum of line totals.
        total_discount: Invoice-level discount amount.
        total_custom_values: Sum of surcharge values.
        total_taxes: Sum of every tax amount.
        tax_map: Invoice-level then line-level tax entries.
        total: Grand total at full precision.
        amount: Grand total rounded to currency precision.
        balance: Amount still owed after previous payments.
        partial: Resolved deposit amount, if any.
    """

    sub_total: Decimal
    total_discount: Decimal
    total_custom_values: Decimal
    total_taxes: Decimal
    tax_map: tuple[TaxMapEntry, ...]
    total: Decimal
    amount: Decimal
    balance: Decimal
    partial: Decimal | None = None


__all__ = ["GroupedTax", "TaxMapEntry", "ComputationResult"]
