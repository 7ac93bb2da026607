"""Application use cases package."""

from .calculate_invoice import CalculateInvoiceUseCase
from .invoice_sum import InvoiceSum

__all__ = [
    "CalculateInvoiceUseCase",
    "InvoiceSum",
]
