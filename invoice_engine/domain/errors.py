"""Exceptions raised around the invoice calculation engine."""


class InvoiceEngineError(Exception):
    """Base class for invoice engine errors."""


class InvalidInvoiceError(InvoiceEngineError, ValueError):
    """Invoice input rejected at the boundary before calculation."""


class InvalidTaxRateError(InvalidInvoiceError):
    """Tax rate is negative or not numeric."""


class MalformedLineItemError(InvalidInvoiceError):
    """Line item data cannot be aggregated."""


class MissingCurrencyPrecisionError(InvoiceEngineError, RuntimeError):
    """No precision is configured for the invoice currency."""

    def __init__(self, currency_code: str | None) -> None:
        self.currency_code = currency_code
        super().__init__(
            f"Missing currency precision for currency: {currency_code}"
        )


class PipelineOrderError(InvoiceEngineError, RuntimeError):
    """A calculation stage ran before its predecessor completed."""


__all__ = [
    "InvoiceEngineError",
    "InvalidInvoiceError",
    "InvalidTaxRateError",
    "MalformedLineItemError",
    "MissingCurrencyPrecisionError",
    "PipelineOrderError",
]
