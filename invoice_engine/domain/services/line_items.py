"""Line-item aggregation: line totals, subtotal and grouped line taxes."""

from decimal import Decimal

from invoice_engine.domain.constants import MAX_LINE_TAX_SLOTS
from invoice_engine.domain.errors import MalformedLineItemError
from invoice_engine.domain.models import GroupedTax, Invoice, LineItem, TaxRate
from invoice_engine.domain.services.valuation import (
    ZERO,
    inclusive_taxer,
    taxer,
)
from invoice_engine.utils.decimal_utils import (
    format_rate,
    parse_decimal,
    round_money,
)


def group_key(tax: TaxRate) -> str:
    """Return the grouping key of a line tax rate (name and rate, no spaces)."""
    return f"{tax.name}{format_rate(tax.rate)}".replace(" ", "")


class LineItemSum:
    """Aggregate the line items of one invoice.

    ``process`` computes each line total (cost times quantity minus the line
    discount, rounded to the currency precision), the subtotal and the
    per-line taxes grouped by tax rate. Percentage invoice discounts are
    applied to the line tax base here; amount discounts need
    :meth:`calc_taxes_with_amount_discount` once the subtotal is known.
    """

    def __init__(self, invoice: Invoice, precision: int) -> None:
        """Initialize the aggregator.

        Args:
            invoice: Invoice whose line items are aggregated.
            precision: Currency decimal places used for line totals.
        """
        self._invoice = invoice
        self._precision = precision
        self._line_items: list[LineItem] = []
        self._sub_total = ZERO
        self._total_taxes = ZERO
        self._grouped_taxes: list[GroupedTax] = []

    def process(self) -> "LineItemSum":
        """Compute line totals, subtotal and grouped taxes.

        Returns:
            LineItemSum: The aggregator, for chaining.

        Raises:
            MalformedLineItemError: If a line item cannot be aggregated.
        """
        items = list(self._invoice.line_items)
        line_totals = []
        sub_total = ZERO
        total_taxes = ZERO
        grouped_taxes: list[GroupedTax] = []
        for position, item in enumerate(items, start=1):
            line_total = self._line_total(item, position)
            line_totals.append(line_total)
            sub_total += line_total
            if item.is_taxable:
                item_tax, rows = self._calc_taxes(
                    item,
                    self._tax_base(line_total),
                    position,
                )
                total_taxes += item_tax
                grouped_taxes.extend(rows)

        # Items are only written once every line has been aggregated.
        for item, line_total in zip(items, line_totals):
            item.line_total = line_total
        self._line_items = items
        self._sub_total = sub_total
        self._total_taxes = total_taxes
        self._grouped_taxes = grouped_taxes
        return self

    def calc_taxes_with_amount_discount(self) -> None:
        """Rebuild grouped taxes with the amount discount spread over lines.

        Each line's tax base is reduced by its share of the invoice discount,
        proportional to its part of the subtotal.
        """
        discount_value = self._invoice.discount.value
        grouped_taxes: list[GroupedTax] = []
        total_taxes = ZERO
        for position, item in enumerate(self._line_items, start=1):
            if not item.line_total or not item.is_taxable:
                continue
            base = item.line_total
            if self._sub_total:
                base -= item.line_total * (discount_value / self._sub_total)
            item_tax, rows = self._calc_taxes(item, base, position)
            total_taxes += item_tax
            grouped_taxes.extend(rows)
        self._grouped_taxes = grouped_taxes
        self._total_taxes = total_taxes

    def get_line_items(self) -> list[LineItem]:
        """Return the processed line items in invoice order."""
        return list(self._line_items)

    def get_sub_total(self) -> Decimal:
        """Return the sum of line totals."""
        return self._sub_total

    def get_grouped_taxes(self) -> list[GroupedTax]:
        """Return line taxes tagged with their group key."""
        return list(self._grouped_taxes)

    def get_total_taxes(self) -> Decimal:
        """Return the sum of line taxes."""
        return self._total_taxes

    def _line_total(self, item: LineItem, position: int) -> Decimal:
        if len(item.taxes) > MAX_LINE_TAX_SLOTS:
            raise MalformedLineItemError(
                f"Line item {position} has {len(item.taxes)} tax rates; "
                f"at most {MAX_LINE_TAX_SLOTS} are supported"
            )
        quantity = self._numeric(item.quantity, "quantity", position)
        cost = self._numeric(item.cost, "cost", position)
        line_discount = self._numeric(item.discount, "discount", position)

        total = cost * quantity
        if self._invoice.is_amount_discount:
            total -= line_discount
        else:
            total -= taxer(total, line_discount)
        return round_money(total, self._precision)

    def _tax_base(self, line_total: Decimal) -> Decimal:
        invoice_discount = self._invoice.discount
        if invoice_discount.is_percentage and invoice_discount.value:
            return line_total - taxer(line_total, invoice_discount.value)
        return line_total

    def _calc_taxes(
        self,
        item: LineItem,
        base: Decimal,
        position: int,
    ) -> tuple[Decimal, list[GroupedTax]]:
        compute = (
            inclusive_taxer if self._invoice.uses_inclusive_taxes else taxer
        )
        item_tax = ZERO
        rows = []
        for tax in item.taxes:
            rate = self._numeric(tax.rate, "tax rate", position)
            if not rate:
                continue
            amount = compute(base, rate)
            item_tax += amount
            if amount:
                rows.append(
                    GroupedTax(
                        key=group_key(tax),
                        tax_name=tax.label,
                        total=amount,
                    )
                )
        return item_tax, rows

    @staticmethod
    def _numeric(value, field_name: str, position: int) -> Decimal:
        if value is None:
            return ZERO
        parsed = parse_decimal(value)
        if parsed is None:
            raise MalformedLineItemError(
                f"Line item {position} has a non-numeric {field_name}: {value!r}"
            )
        return parsed


__all__ = ["LineItemSum", "group_key"]
