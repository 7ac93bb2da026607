"""Domain constants for invoice calculations."""

MAX_INVOICE_TAX_SLOTS = 3
MAX_LINE_TAX_SLOTS = 3
MAX_SURCHARGE_SLOTS = 4

PARTIAL_PRECISION = 2

TAX_SOURCE_INVOICE = "invoice"
TAX_SOURCE_LINE = "line"


__all__ = [
    "MAX_INVOICE_TAX_SLOTS",
    "MAX_LINE_TAX_SLOTS",
    "MAX_SURCHARGE_SLOTS",
    "PARTIAL_PRECISION",
    "TAX_SOURCE_INVOICE",
    "TAX_SOURCE_LINE",
]
