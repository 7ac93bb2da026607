"""Invoice totals orchestrator.

``InvoiceSum`` runs the calculation stages in their fixed order:

* line-item aggregation;
* invoice discount;
* custom surcharges;
* invoice-level taxes;
* tax map merge of grouped line taxes;
* totals;
* balance reconciliation;
* partial (deposit) resolution.

The stages share one :class:`CalculationContext`; the orchestrator's only
side effect is writing the computed state back onto the invoice, plus an
explicit save through :meth:`InvoiceSum.get_invoice`.
"""

from decimal import Decimal

from invoice_engine.application.ports.currency_repository import (
    CurrencyRepositoryPort,
)
from invoice_engine.application.ports.invoice_repository import (
    InvoiceRepositoryPort,
)
from invoice_engine.application.ports.line_item_aggregator import (
    LineItemAggregatorFactory,
)
from invoice_engine.domain.constants import TAX_SOURCE_INVOICE
from invoice_engine.domain.errors import (
    MissingCurrencyPrecisionError,
    PipelineOrderError,
)
from invoice_engine.domain.models import ComputationResult, Invoice, TaxMapEntry
from invoice_engine.domain.services.line_items import LineItemSum
from invoice_engine.domain.services.pipeline import (
    CalculationContext,
    calculate_balance,
    calculate_custom_values,
    calculate_discount,
    calculate_invoice_taxes,
    calculate_line_items,
    calculate_partial,
    calculate_tax_map,
    calculate_totals,
    to_result,
)
from invoice_engine.infrastructure.logging.logger import get_app_logger


class InvoiceSum:
    """Compute and expose the totals of a single invoice."""

    def __init__(
        self,
        invoice: Invoice,
        currency_repository: CurrencyRepositoryPort,
        invoice_repository: InvoiceRepositoryPort | None = None,
        aggregator_factory: LineItemAggregatorFactory = LineItemSum,
        logger=None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            invoice: Invoice to calculate; owned by the caller for the
                duration of the calculation.
            currency_repository: Port resolving the currency precision.
            invoice_repository: Optional port used by :meth:`get_invoice`.
            aggregator_factory: Builds the line-item aggregator from the
                invoice and the currency precision.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._invoice = invoice
        self._currency_repository = currency_repository
        self._invoice_repository = invoice_repository
        self._aggregator_factory = aggregator_factory
        self._logger = logger or get_app_logger()
        self._context: CalculationContext | None = None
        self._result: ComputationResult | None = None

    def build(self) -> "InvoiceSum":
        """Run the calculation pipeline and write the totals onto the invoice.

        Returns:
            InvoiceSum: The orchestrator, for chaining.

        Raises:
            MissingCurrencyPrecisionError: If no precision is configured.
            MalformedLineItemError: If the aggregator rejects a line item.
        """
        precision = self._fetch_precision()
        context = CalculationContext(
            invoice=self._invoice,
            precision=precision,
            aggregator=self._aggregator_factory(self._invoice, precision),
        )
        context = calculate_line_items(context)
        context = calculate_discount(context, logger=self._logger)
        context = calculate_custom_values(context)
        context = calculate_invoice_taxes(context)
        context = calculate_tax_map(context)
        context = calculate_totals(context)
        context = calculate_balance(context)
        context = calculate_partial(context)

        self._result = to_result(context)
        self._context = context
        self._apply_calculated_attributes()
        self._logger.info(
            f"Invoice {self._invoice.number or 'draft'} calculated: "
            f"amount={self._result.amount}, balance={self._result.balance}"
        )
        return self

    def get_invoice(self) -> Invoice:
        """Write the computed totals onto the invoice and save it.

        Returns:
            Invoice: The saved invoice.

        Raises:
            RuntimeError: If no invoice repository was provided.
        """
        if self._invoice_repository is None:
            raise RuntimeError(
                "No invoice repository configured; "
                "use get_calculated_invoice() for a calculation without save."
            )
        invoice = self.get_calculated_invoice()
        saved = self._invoice_repository.save(invoice)
        self._logger.info(f"Invoice {saved.id} saved")
        return saved

    def get_calculated_invoice(self) -> Invoice:
        """Return the invoice with the computed totals, without saving it."""
        if self._result is None:
            self.build()
        else:
            self._apply_calculated_attributes()
        return self._invoice

    @property
    def result(self) -> ComputationResult:
        """Return the totals of the last build."""
        if self._result is None:
            raise PipelineOrderError("Invoice totals have not been built")
        return self._result

    @property
    def sub_total(self) -> Decimal:
        return self.result.sub_total

    @property
    def total_discount(self) -> Decimal:
        return self.result.total_discount

    @property
    def total_custom_values(self) -> Decimal:
        return self.result.total_custom_values

    @property
    def total_taxes(self) -> Decimal:
        return self.result.total_taxes

    @property
    def item_total_taxes(self) -> Decimal:
        return self.total_taxes

    @property
    def tax_map(self) -> tuple[TaxMapEntry, ...]:
        """Return invoice-level then line-level tax entries."""
        return self.result.tax_map

    @property
    def total_tax_map(self) -> tuple[TaxMapEntry, ...]:
        """Return the invoice-level tax entries only."""
        return tuple(
            entry
            for entry in self.result.tax_map
            if entry.source == TAX_SOURCE_INVOICE
        )

    @property
    def total(self) -> Decimal:
        """Return the grand total at full precision."""
        return self.result.total

    @property
    def balance(self) -> Decimal:
        return self._invoice.balance

    def _fetch_precision(self) -> int:
        precision = self._currency_repository.fetch_precision(
            self._invoice.currency_code
        )
        if precision is None:
            raise MissingCurrencyPrecisionError(self._invoice.currency_code)
        return precision

    def _apply_calculated_attributes(self) -> None:
        context = self._context
        self._invoice.line_items = list(context.line_items)
        self._invoice.amount = context.amount
        self._invoice.balance = context.balance
        self._invoice.partial = context.partial


__all__ = ["InvoiceSum"]
