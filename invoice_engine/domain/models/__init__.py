"""Domain models package."""

from .invoice import Discount, Invoice, LineItem, Surcharge, TaxRate
from .totals import ComputationResult, GroupedTax, TaxMapEntry

__all__ = [
    "Discount",
    "Invoice",
    "LineItem",
    "Surcharge",
    "TaxRate",
    "ComputationResult",
    "GroupedTax",
    "TaxMapEntry",
]
