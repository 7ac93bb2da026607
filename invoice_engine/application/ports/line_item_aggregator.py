"""Port for the line-item aggregation collaborator."""

from collections.abc import Callable
from decimal import Decimal
from typing import Protocol

from invoice_engine.domain.models import GroupedTax, Invoice, LineItem


class LineItemAggregatorPort(Protocol):
    """Port computing line totals, the subtotal and grouped line taxes."""

    def process(self) -> object:
        """Compute per-line totals and taxes.

        Malformed line data raises immediately; no partial results are kept.
        """

    def get_line_items(self) -> list[LineItem]:
        """Return the processed line items in invoice order."""

    def get_sub_total(self) -> Decimal:
        """Return the sum of line totals."""

    def get_grouped_taxes(self) -> list[GroupedTax]:
        """Return line taxes tagged with their tax-rate group key."""

    def calc_taxes_with_amount_discount(self) -> None:
        """Redistribute an amount discount over the grouped line taxes."""


LineItemAggregatorFactory = Callable[[Invoice, int], LineItemAggregatorPort]


__all__ = [
    "GroupedTax",
    "LineItemAggregatorPort",
    "LineItemAggregatorFactory",
]
