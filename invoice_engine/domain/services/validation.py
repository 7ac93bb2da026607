"""Boundary validation for invoices entering the calculation engine.

The engine trusts its input; these checks run before it is invoked.
"""

from invoice_engine.domain.constants import (
    MAX_INVOICE_TAX_SLOTS,
    MAX_LINE_TAX_SLOTS,
    MAX_SURCHARGE_SLOTS,
)
from invoice_engine.domain.errors import (
    InvalidInvoiceError,
    InvalidTaxRateError,
    MalformedLineItemError,
)
from invoice_engine.domain.models import Invoice, TaxRate
from invoice_engine.utils.decimal_utils import parse_decimal


def validate_tax_rate(tax: TaxRate, context: str) -> None:
    """Reject negative or non-numeric tax rates.

    Args:
        tax: Tax rate to check.
        context: Human-readable location used in the error message.

    Raises:
        InvalidTaxRateError: If the rate is not a non-negative number.
    """
    rate = parse_decimal(tax.rate)
    if rate is None:
        raise InvalidTaxRateError(
            f"{context}: tax rate for '{tax.name}' is not numeric: {tax.rate!r}"
        )
    if rate < 0:
        raise InvalidTaxRateError(
            f"{context}: tax rate for '{tax.name}' is negative: {rate}"
        )


def validate_invoice(invoice: Invoice) -> None:
    """Validate an invoice before calculating it.

    Args:
        invoice: Invoice to check.

    Raises:
        InvalidInvoiceError: If slot counts or the discount are invalid.
        InvalidTaxRateError: If any tax rate is negative or not numeric.
        MalformedLineItemError: If a line item is not numeric.
    """
    if len(invoice.taxes) > MAX_INVOICE_TAX_SLOTS:
        raise InvalidInvoiceError(
            f"Invoice has {len(invoice.taxes)} tax rates; "
            f"at most {MAX_INVOICE_TAX_SLOTS} are supported"
        )
    if len(invoice.surcharges) > MAX_SURCHARGE_SLOTS:
        raise InvalidInvoiceError(
            f"Invoice has {len(invoice.surcharges)} surcharges; "
            f"at most {MAX_SURCHARGE_SLOTS} are supported"
        )
    for slot, tax in enumerate(invoice.taxes, start=1):
        validate_tax_rate(tax, f"Invoice tax {slot}")

    if parse_decimal(invoice.discount.value) is None:
        raise InvalidInvoiceError(
            f"Invoice discount is not numeric: {invoice.discount.value!r}"
        )

    for position, item in enumerate(invoice.line_items, start=1):
        if len(item.taxes) > MAX_LINE_TAX_SLOTS:
            raise MalformedLineItemError(
                f"Line item {position} has {len(item.taxes)} tax rates; "
                f"at most {MAX_LINE_TAX_SLOTS} are supported"
            )
        for field_name in ("quantity", "cost", "discount"):
            raw = getattr(item, field_name)
            if raw is not None and parse_decimal(raw) is None:
                raise MalformedLineItemError(
                    f"Line item {position} has a non-numeric "
                    f"{field_name}: {raw!r}"
                )
        for tax in item.taxes:
            validate_tax_rate(tax, f"Line item {position}")


__all__ = ["validate_invoice", "validate_tax_rate"]
