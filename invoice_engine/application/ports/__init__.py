"""Application ports package."""

from .currency_repository import CurrencyRepositoryPort
from .database import DatabaseEnginePort
from .invoice_repository import InvoiceRepositoryPort
from .line_item_aggregator import (
    GroupedTax,
    LineItemAggregatorFactory,
    LineItemAggregatorPort,
)

__all__ = [
    "CurrencyRepositoryPort",
    "DatabaseEnginePort",
    "InvoiceRepositoryPort",
    "GroupedTax",
    "LineItemAggregatorFactory",
    "LineItemAggregatorPort",
]
