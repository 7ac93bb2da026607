"""Domain package for invoice models and calculation rules."""

from .errors import (
    InvalidInvoiceError,
    InvalidTaxRateError,
    InvoiceEngineError,
    MalformedLineItemError,
    MissingCurrencyPrecisionError,
    PipelineOrderError,
)
from .models import (
    ComputationResult,
    Discount,
    GroupedTax,
    Invoice,
    LineItem,
    Surcharge,
    TaxMapEntry,
    TaxRate,
)

__all__ = [
    "InvalidInvoiceError",
    "InvalidTaxRateError",
    "InvoiceEngineError",
    "MalformedLineItemError",
    "MissingCurrencyPrecisionError",
    "PipelineOrderError",
    "ComputationResult",
    "Discount",
    "GroupedTax",
    "Invoice",
    "LineItem",
    "Surcharge",
    "TaxMapEntry",
    "TaxRate",
]
