"""Invoice-level discount calculation."""

from decimal import Decimal
from logging import Logger

from invoice_engine.domain.models import Discount
from invoice_engine.domain.services.valuation import taxer


def discount(
    base: Decimal,
    invoice_discount: Discount,
    logger: Logger | None = None,
) -> Decimal:
    """Return the discount to subtract from ``base``.

    Amount discounts are returned as configured, without capping them at
    the base. A discount larger than the base leaves a negative running
    total; this is only reported through ``logger``.

    Args:
        base: Amount the discount applies to (the line subtotal).
        invoice_discount: Invoice discount specifier.
        logger: Optional logger used to warn about oversized discounts.

    Returns:
        Decimal: Discount amount.
    """
    if invoice_discount.is_amount:
        amount = invoice_discount.value
    else:
        amount = taxer(base, invoice_discount.value)
    if logger is not None and amount > base:
        logger.warning(
            f"Discount {amount} exceeds discounted base {base}; "
            "running total will be negative"
        )
    return amount


__all__ = ["discount"]
