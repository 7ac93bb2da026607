"""Calculation stages of the invoice totals pipeline.

Every stage takes the :class:`CalculationContext`, updates it and returns
it. The context remembers the last completed stage, so a stage refuses to
run unless its predecessor has just completed.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from logging import Logger

from invoice_engine.application.ports.line_item_aggregator import (
    LineItemAggregatorPort,
)
from invoice_engine.domain.errors import PipelineOrderError
from invoice_engine.domain.models import (
    ComputationResult,
    Invoice,
    LineItem,
    TaxMapEntry,
)
from invoice_engine.domain.services.balance import (
    resolve_balance,
    resolve_partial,
)
from invoice_engine.domain.services.discount import discount
from invoice_engine.domain.services.surcharges import accumulate_surcharges
from invoice_engine.domain.services.tax_map import (
    apply_invoice_taxes,
    build_line_tax_map,
    sum_tax_map,
)
from invoice_engine.domain.services.valuation import ZERO


class Stage(IntEnum):
    """Pipeline stages in execution order."""

    NEW = 0
    LINE_ITEMS = 1
    DISCOUNT = 2
    CUSTOM_VALUES = 3
    INVOICE_TAXES = 4
    TAX_MAP = 5
    TOTALS = 6
    BALANCE = 7
    PARTIAL = 8


@dataclass
class CalculationContext:
    """Running state of one invoice calculation.

    Attributes:
        invoice: Invoice being calculated. Stages never write its totals.
        precision: Currency decimal places.
        aggregator: Line-item aggregator used by the line-item and tax map
            stages.
        stage: Last completed stage.
    """

    invoice: Invoice
    precision: int
    aggregator: LineItemAggregatorPort
    stage: Stage = Stage.NEW
    line_items: list[LineItem] = field(default_factory=list)
    sub_total: Decimal = ZERO
    total: Decimal = ZERO
    total_discount: Decimal = ZERO
    total_custom_values: Decimal = ZERO
    total_taxes: Decimal = ZERO
    invoice_tax_map: list[TaxMapEntry] = field(default_factory=list)
    line_tax_map: list[TaxMapEntry] = field(default_factory=list)
    amount: Decimal | None = None
    balance: Decimal | None = None
    partial: Decimal | None = None

    @property
    def tax_map(self) -> tuple[TaxMapEntry, ...]:
        """Return invoice-level entries followed by line-level entries."""
        return tuple(self.invoice_tax_map) + tuple(self.line_tax_map)

    def require_ready(self, stage: Stage) -> None:
        """Check that ``stage`` directly follows the last completed stage.

        Raises:
            PipelineOrderError: If the previous stage has not just completed.
        """
        if self.stage != stage - 1:
            raise PipelineOrderError(
                f"Stage {stage.name} cannot run after {self.stage.name}"
            )


def calculate_line_items(context: CalculationContext) -> CalculationContext:
    """Aggregate line items and seed the running total with the subtotal."""
    context.require_ready(Stage.LINE_ITEMS)
    aggregator = context.aggregator
    aggregator.process()
    context.line_items = aggregator.get_line_items()
    context.sub_total = aggregator.get_sub_total()
    context.total = context.sub_total
    context.stage = Stage.LINE_ITEMS
    return context


def calculate_discount(
    context: CalculationContext,
    logger: Logger | None = None,
) -> CalculationContext:
    """Subtract the invoice discount from the running total."""
    context.require_ready(Stage.DISCOUNT)
    context.total_discount = discount(
        context.sub_total,
        context.invoice.discount,
        logger=logger,
    )
    context.total -= context.total_discount
    context.stage = Stage.DISCOUNT
    return context


def calculate_custom_values(context: CalculationContext) -> CalculationContext:
    """Add surcharge values to the total and their taxes to the tax total."""
    context.require_ready(Stage.CUSTOM_VALUES)
    totals = accumulate_surcharges(
        context.invoice.surcharges,
        context.invoice.taxes,
        context.sub_total,
        inclusive=context.invoice.uses_inclusive_taxes,
    )
    context.total_taxes += totals.taxes
    context.total_custom_values += totals.custom_values
    context.total += context.total_custom_values
    context.stage = Stage.CUSTOM_VALUES
    return context


def calculate_invoice_taxes(context: CalculationContext) -> CalculationContext:
    """Apply the invoice-level tax slots to the running total."""
    context.require_ready(Stage.INVOICE_TAXES)
    context.invoice_tax_map = apply_invoice_taxes(
        context.total,
        context.invoice.taxes,
        inclusive=context.invoice.uses_inclusive_taxes,
    )
    context.total_taxes += sum_tax_map(context.invoice_tax_map)
    context.stage = Stage.INVOICE_TAXES
    return context


def calculate_tax_map(context: CalculationContext) -> CalculationContext:
    """Merge grouped line taxes into the tax map and the tax total."""
    context.require_ready(Stage.TAX_MAP)
    aggregator = context.aggregator
    if context.invoice.is_amount_discount:
        aggregator.calc_taxes_with_amount_discount()
    context.line_tax_map = build_line_tax_map(aggregator.get_grouped_taxes())
    context.total_taxes += sum_tax_map(context.line_tax_map)
    context.stage = Stage.TAX_MAP
    return context


def calculate_totals(context: CalculationContext) -> CalculationContext:
    """Add the tax total to the running total.

    Inclusive taxes are already part of the line totals and are not added
    again.
    """
    context.require_ready(Stage.TOTALS)
    if not context.invoice.uses_inclusive_taxes:
        context.total += context.total_taxes
    context.stage = Stage.TOTALS
    return context


def calculate_balance(context: CalculationContext) -> CalculationContext:
    """Round the grand total and reconcile it with payments to date."""
    context.require_ready(Stage.BALANCE)
    resolved = resolve_balance(
        context.total,
        context.invoice.amount,
        context.invoice.balance,
        context.precision,
    )
    context.amount = resolved.amount
    context.balance = resolved.balance
    context.stage = Stage.BALANCE
    return context


def calculate_partial(context: CalculationContext) -> CalculationContext:
    """Clamp the requested deposit of a not yet persisted invoice."""
    context.require_ready(Stage.PARTIAL)
    invoice = context.invoice
    if invoice.id is None and invoice.partial is not None:
        context.partial = resolve_partial(invoice.partial, context.balance)
    else:
        context.partial = invoice.partial
    context.stage = Stage.PARTIAL
    return context


def to_result(context: CalculationContext) -> ComputationResult:
    """Freeze a completed context into a :class:`ComputationResult`.

    Raises:
        PipelineOrderError: If the pipeline has not completed.
    """
    if context.stage != Stage.PARTIAL:
        raise PipelineOrderError(
            f"Pipeline incomplete: last stage was {context.stage.name}"
        )
    return ComputationResult(
        sub_total=context.sub_total,
        total_discount=context.total_discount,
        total_custom_values=context.total_custom_values,
        total_taxes=context.total_taxes,
        tax_map=context.tax_map,
        total=context.total,
        amount=context.amount,
        balance=context.balance,
        partial=context.partial,
    )


__all__ = [
    "Stage",
    "CalculationContext",
    "calculate_line_items",
    "calculate_discount",
    "calculate_custom_values",
    "calculate_invoice_taxes",
    "calculate_tax_map",
    "calculate_totals",
    "calculate_balance",
    "calculate_partial",
    "to_result",
]
