"""Use case to validate, calculate and optionally save an invoice."""

from invoice_engine.application.ports.currency_repository import (
    CurrencyRepositoryPort,
)
from invoice_engine.application.ports.invoice_repository import (
    InvoiceRepositoryPort,
)
from invoice_engine.application.ports.line_item_aggregator import (
    LineItemAggregatorFactory,
)
from invoice_engine.application.use_cases.invoice_sum import InvoiceSum
from invoice_engine.domain.models import ComputationResult, Invoice
from invoice_engine.domain.services.line_items import LineItemSum
from invoice_engine.domain.services.validation import validate_invoice
from invoice_engine.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)


class CalculateInvoiceUseCase:
    """Validate an invoice at the boundary and compute its totals."""

    def __init__(
        self,
        currency_repository: CurrencyRepositoryPort,
        invoice_repository: InvoiceRepositoryPort | None = None,
        logger=None,
        usage_logger=None,
        aggregator_factory: LineItemAggregatorFactory = LineItemSum,
    ) -> None:
        """Initialize the use case.

        Args:
            currency_repository: Port resolving currency precisions.
            invoice_repository: Optional port used when saving results.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger recording calculated invoices.
            aggregator_factory: Builds the line-item aggregator.
        """
        self._currency_repository = currency_repository
        self._invoice_repository = invoice_repository
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()
        self._aggregator_factory = aggregator_factory

    def execute(self, invoice: Invoice, save: bool = False) -> ComputationResult:
        """Return the computed totals of ``invoice``.

        The invoice is updated in place with the new amount, balance and
        partial.

        Args:
            invoice: Invoice to calculate.
            save: Persist the invoice after calculation.

        Returns:
            ComputationResult: Totals of the calculation.

        Raises:
            InvalidInvoiceError: If the invoice fails boundary validation.
            MissingCurrencyPrecisionError: If the currency is unknown.
            RuntimeError: If ``save`` is requested without a repository.
        """
        validate_invoice(invoice)
        invoice_sum = InvoiceSum(
            invoice,
            currency_repository=self._currency_repository,
            invoice_repository=self._invoice_repository,
            aggregator_factory=self._aggregator_factory,
            logger=self._logger,
        ).build()
        if save:
            invoice_sum.get_invoice()
        result = invoice_sum.result
        self._usage_logger.info(
            f"calculated invoice={invoice.id} currency={invoice.currency_code} "
            f"lines={len(invoice.line_items)} amount={result.amount}"
        )
        return result


__all__ = ["CalculateInvoiceUseCase"]
