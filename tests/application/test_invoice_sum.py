"""Tests for the InvoiceSum orchestrator."""

from decimal import Decimal
from itertools import permutations
from unittest.mock import MagicMock

import pytest

from invoice_engine.application.use_cases.invoice_sum import InvoiceSum
from invoice_engine.domain.constants import TAX_SOURCE_INVOICE, TAX_SOURCE_LINE
from invoice_engine.domain.errors import (
    MalformedLineItemError,
    MissingCurrencyPrecisionError,
    PipelineOrderError,
)
from invoice_engine.domain.models import (
    Discount,
    GroupedTax,
    Invoice,
    LineItem,
    Surcharge,
    TaxMapEntry,
    TaxRate,
)
from invoice_engine.infrastructure.currency_repository import (
    InMemoryCurrencyRepository,
)
from invoice_engine.infrastructure.invoice_repository import (
    InMemoryInvoiceRepository,
)


CURRENCIES = InMemoryCurrencyRepository({"EUR": 2, "JPY": 0})


def _line(cost: str, quantity: str = "1", taxes=None, **kwargs) -> LineItem:
    return LineItem(
        quantity=Decimal(quantity),
        cost=Decimal(cost),
        taxes=list(taxes or []),
        **kwargs,
    )


def _tax(name: str, rate: str) -> TaxRate:
    return TaxRate(name=name, rate=Decimal(rate))


def _build(invoice: Invoice, **kwargs) -> InvoiceSum:
    return InvoiceSum(
        invoice,
        currency_repository=kwargs.pop("currency_repository", CURRENCIES),
        logger=kwargs.pop("logger", MagicMock()),
        **kwargs,
    ).build()


def test_empty_invoice_totals_are_zero() -> None:
    """An invoice without lines, taxes or surcharges totals zero."""
    invoice = Invoice(currency_code="EUR")

    invoice_sum = _build(invoice)

    assert invoice_sum.sub_total == Decimal("0")
    assert invoice_sum.total_taxes == Decimal("0")
    assert invoice_sum.tax_map == ()
    assert invoice.amount == Decimal("0")
    assert invoice.balance == Decimal("0")


def test_total_combines_discount_surcharge_and_taxes() -> None:
    """total == sub_total - discount + custom values + taxes."""
    invoice = Invoice(
        currency_code="EUR",
        line_items=[_line("100", taxes=[_tax("GST", "5")]), _line("50", "2")],
        taxes=[_tax("VAT", "10")],
        surcharges=[Surcharge(value=Decimal("20"), is_taxable=True)],
        discount=Discount(value=Decimal("10")),
    )

    invoice_sum = _build(invoice)

    assert invoice_sum.sub_total == Decimal("200")
    assert invoice_sum.total_discount == Decimal("20")
    assert invoice_sum.total_custom_values == Decimal("20")
    # surcharge tax 2, invoice VAT on 200 - 20 + 20 = 20, line GST on 90 = 4.5
    assert invoice_sum.total_taxes == Decimal("26.5")
    assert invoice_sum.total == (
        invoice_sum.sub_total
        - invoice_sum.total_discount
        + invoice_sum.total_custom_values
        + invoice_sum.total_taxes
    )
    assert invoice.amount == Decimal("226.50")


def test_percentage_discount_with_invoice_tax() -> None:
    """100 with a 10% discount and 10% invoice tax totals 99."""
    invoice = Invoice(
        currency_code="EUR",
        line_items=[_line("100")],
        taxes=[_tax("VAT", "10")],
        discount=Discount(value=Decimal("10")),
    )

    invoice_sum = _build(invoice)

    assert invoice_sum.total_discount == Decimal("10")
    assert invoice_sum.tax_map == (
        TaxMapEntry(name="VAT 10%", total=Decimal("9"), source=TAX_SOURCE_INVOICE),
    )
    assert invoice.amount == Decimal("99.00")
    assert invoice.balance == Decimal("99.00")


def test_tax_map_sums_to_total_taxes_without_surcharges() -> None:
    """Without taxable surcharges the tax map accounts for every tax."""
    invoice = Invoice(
        currency_code="EUR",
        line_items=[
            _line("100", taxes=[_tax("VAT", "20")]),
            _line("40", taxes=[_tax("VAT", "20"), _tax("Eco", "1")]),
        ],
        taxes=[_tax("City", "2")],
    )

    invoice_sum = _build(invoice)

    assert sum(entry.total for entry in invoice_sum.tax_map) == (
        invoice_sum.total_taxes
    )


def test_tax_map_lists_invoice_entries_before_line_entries() -> None:
    """Identical names from both sources stay separate entries."""
    invoice = Invoice(
        currency_code="EUR",
        line_items=[_line("100", taxes=[_tax("VAT", "10")])],
        taxes=[_tax("VAT", "10")],
    )

    invoice_sum = _build(invoice)

    assert invoice_sum.tax_map == (
        TaxMapEntry(name="VAT 10%", total=Decimal("10"), source=TAX_SOURCE_INVOICE),
        TaxMapEntry(name="VAT 10%", total=Decimal("10"), source=TAX_SOURCE_LINE),
    )
    assert invoice_sum.total_tax_map == invoice_sum.tax_map[:1]


def test_line_taxes_grouped_in_first_appearance_order() -> None:
    """Line taxes sharing name and rate are summed into one entry."""
    invoice = Invoice(
        currency_code="EUR",
        line_items=[
            _line("100", taxes=[_tax("GST", "5")]),
            _line("200", taxes=[_tax("VAT", "20"), _tax("GST", "5")]),
        ],
    )

    invoice_sum = _build(invoice)

    assert [(entry.name, entry.total) for entry in invoice_sum.tax_map] == [
        ("GST 5%", Decimal("15")),
        ("VAT 20%", Decimal("40")),
    ]


def test_amount_discount_redistributes_line_taxes() -> None:
    """Line taxes are computed on bases reduced by the discount share."""
    invoice = Invoice(
        currency_code="EUR",
        line_items=[
            _line("100", taxes=[_tax("VAT", "10")]),
            _line("100", taxes=[_tax("VAT", "10")]),
        ],
        discount=Discount(value=Decimal("20"), is_amount=True),
    )

    invoice_sum = _build(invoice)

    assert invoice_sum.tax_map[0].total == Decimal("18")
    assert invoice.amount == Decimal("198.00")


def test_oversized_amount_discount_produces_negative_total() -> None:
    """A discount larger than the subtotal is not capped."""
    logger = MagicMock()
    invoice = Invoice(
        currency_code="EUR",
        line_items=[_line("100")],
        discount=Discount(value=Decimal("150"), is_amount=True),
    )

    _build(invoice, logger=logger)

    assert invoice.amount == Decimal("-50.00")
    assert invoice.balance == Decimal("-50.00")
    logger.warning.assert_called_once()


def test_taxable_surcharge_is_taxed_by_invoice_rate() -> None:
    """A taxable surcharge of 20 at 10% adds 2 in surcharge tax."""
    invoice = Invoice(
        currency_code="EUR",
        taxes=[_tax("VAT", "10")],
        surcharges=[Surcharge(value=Decimal("20"), is_taxable=True)],
    )

    invoice_sum = _build(invoice)

    # 2 on the surcharge itself plus 2 from the invoice tax on the total
    assert invoice_sum.total_taxes == Decimal("4")
    assert invoice_sum.total_custom_values == Decimal("20")
    assert invoice.amount == Decimal("24.00")


def test_surcharge_slot_order_does_not_change_amount() -> None:
    """Permuting surcharge slots leaves the result unchanged."""
    slots = [
        Surcharge(value=Decimal("20"), is_taxable=True),
        Surcharge(value=Decimal("2.5"), is_percentage=True),
        Surcharge(value=Decimal("7.10"), is_taxable=True),
        Surcharge(),
    ]
    amounts = set()
    for ordering in permutations(slots):
        invoice = Invoice(
            currency_code="EUR",
            line_items=[_line("80")],
            taxes=[_tax("VAT", "10")],
            surcharges=list(ordering),
        )
        amounts.add(_build(invoice).result.amount)

    assert len(amounts) == 1


def test_balance_preserves_paid_to_date() -> None:
    """Raising the total keeps previous payments in the balance."""
    invoice = Invoice(
        id=12,
        currency_code="EUR",
        line_items=[_line("120")],
        amount=Decimal("100"),
        balance=Decimal("60"),
    )

    invoice_sum = _build(invoice)

    assert invoice.amount == Decimal("120.00")
    assert invoice.balance == Decimal("80.00")
    assert invoice_sum.balance == Decimal("80.00")
    assert invoice.paid_to_date == Decimal("40")


def test_partial_clamped_for_new_invoice() -> None:
    """A new invoice's deposit is clamped into [0, balance]."""
    too_large = Invoice(
        currency_code="EUR",
        line_items=[_line("50")],
        partial=Decimal("1000"),
    )
    negative = Invoice(
        currency_code="EUR",
        line_items=[_line("50")],
        partial=Decimal("-5"),
    )

    _build(too_large)
    _build(negative)

    assert too_large.partial == Decimal("50.00")
    assert negative.partial == Decimal("0")


def test_partial_untouched_for_persisted_invoice() -> None:
    """Saved invoices keep their partial as is."""
    invoice = Invoice(
        id=7,
        currency_code="EUR",
        line_items=[_line("50")],
        partial=Decimal("1000"),
    )

    _build(invoice)

    assert invoice.partial == Decimal("1000")


def test_amount_rounded_half_up_to_currency_precision() -> None:
    """Only the final amount is rounded, to the currency precision."""
    eur = Invoice(
        currency_code="EUR",
        line_items=[_line("10.005")],
        taxes=[_tax("VAT", "7.5")],
    )
    jpy = Invoice(
        currency_code="JPY",
        line_items=[_line("100")],
        taxes=[_tax("VAT", "7.5")],
    )

    eur_sum = _build(eur)
    _build(jpy)

    assert eur_sum.sub_total == Decimal("10.01")
    assert eur_sum.total == Decimal("10.76075")
    assert eur.amount == Decimal("10.76")
    assert jpy.amount == Decimal("108")


def test_inclusive_taxes_are_not_added_to_total() -> None:
    """Inclusive invoices report contained taxes without adding them."""
    invoice = Invoice(
        currency_code="EUR",
        line_items=[_line("110", taxes=[_tax("VAT", "10")])],
        uses_inclusive_taxes=True,
    )

    invoice_sum = _build(invoice)

    assert invoice_sum.total_taxes == Decimal("10")
    assert invoice.amount == Decimal("110.00")


def test_building_twice_is_stable() -> None:
    """Recalculating a calculated invoice yields the same totals."""
    invoice = Invoice(
        currency_code="EUR",
        line_items=[_line("33.333", "3", taxes=[_tax("VAT", "19")])],
        taxes=[_tax("City", "1.5")],
        surcharges=[Surcharge(value=Decimal("4.99"), is_taxable=True)],
        discount=Discount(value=Decimal("3.5")),
        partial=Decimal("20"),
    )

    first = _build(invoice).result
    second = _build(invoice).result

    assert first == second
    assert invoice.amount == second.amount


def test_missing_currency_precision_propagates() -> None:
    """Unknown currencies abort the build."""
    invoice = Invoice(currency_code="XXX", line_items=[_line("10")])

    with pytest.raises(MissingCurrencyPrecisionError) as exc_info:
        _build(invoice)

    assert exc_info.value.currency_code == "XXX"
    assert invoice.amount == Decimal("0")


def test_none_precision_is_treated_as_missing() -> None:
    """A repository returning None is reported as a missing precision."""
    currency_repository = MagicMock()
    currency_repository.fetch_precision.return_value = None

    with pytest.raises(MissingCurrencyPrecisionError, match="EUR"):
        _build(Invoice(currency_code="EUR"), currency_repository=currency_repository)


def test_malformed_line_item_leaves_invoice_untouched() -> None:
    """Aggregator failures propagate and no totals are written."""
    invoice = Invoice(
        currency_code="EUR",
        line_items=[LineItem(quantity="lots", cost=Decimal("10"))],
        amount=Decimal("5"),
        balance=Decimal("5"),
    )
    invoice_sum = InvoiceSum(
        invoice,
        currency_repository=CURRENCIES,
        logger=MagicMock(),
    )

    with pytest.raises(MalformedLineItemError):
        invoice_sum.build()

    assert invoice.amount == Decimal("5")
    with pytest.raises(PipelineOrderError):
        invoice_sum.result


def test_custom_aggregator_is_used() -> None:
    """The aggregator factory receives the invoice and the precision."""
    aggregator = MagicMock()
    aggregator.get_line_items.return_value = []
    aggregator.get_sub_total.return_value = Decimal("100")
    aggregator.get_grouped_taxes.return_value = [
        GroupedTax(key="VAT10", tax_name="VAT 10%", total=Decimal("4")),
        GroupedTax(key="VAT10", tax_name="VAT 10%", total=Decimal("6")),
    ]
    factory = MagicMock(return_value=aggregator)
    invoice = Invoice(currency_code="JPY")

    invoice_sum = _build(invoice, aggregator_factory=factory)

    factory.assert_called_once_with(invoice, 0)
    aggregator.process.assert_called_once()
    aggregator.calc_taxes_with_amount_discount.assert_not_called()
    assert invoice_sum.tax_map == (
        TaxMapEntry(name="VAT 10%", total=Decimal("10"), source=TAX_SOURCE_LINE),
    )
    assert invoice.amount == Decimal("110")


def test_amount_discount_triggers_redistribution_on_aggregator() -> None:
    """Amount discounts ask the aggregator to redistribute line taxes."""
    aggregator = MagicMock()
    aggregator.get_line_items.return_value = []
    aggregator.get_sub_total.return_value = Decimal("0")
    aggregator.get_grouped_taxes.return_value = []
    invoice = Invoice(
        currency_code="EUR",
        discount=Discount(value=Decimal("0"), is_amount=True),
    )

    _build(invoice, aggregator_factory=MagicMock(return_value=aggregator))

    aggregator.calc_taxes_with_amount_discount.assert_called_once()


def test_get_invoice_requires_repository() -> None:
    """Saving without a repository raises."""
    invoice_sum = _build(Invoice(currency_code="EUR"))

    with pytest.raises(RuntimeError, match="repository"):
        invoice_sum.get_invoice()


def test_get_invoice_saves_calculated_invoice() -> None:
    """get_invoice persists the invoice with its computed totals."""
    repository = InMemoryInvoiceRepository()
    invoice = Invoice(currency_code="EUR", line_items=[_line("42")])

    saved = _build(invoice, invoice_repository=repository).get_invoice()

    assert saved.id == 1
    assert repository.get(1).amount == Decimal("42.00")


def test_get_calculated_invoice_builds_lazily() -> None:
    """get_calculated_invoice runs the pipeline when needed."""
    invoice = Invoice(currency_code="EUR", line_items=[_line("10")])
    invoice_sum = InvoiceSum(
        invoice,
        currency_repository=CURRENCIES,
        logger=MagicMock(),
    )

    calculated = invoice_sum.get_calculated_invoice()

    assert calculated is invoice
    assert calculated.amount == Decimal("10.00")
    assert calculated.line_items[0].line_total == Decimal("10.00")


def test_malformed_second_line_aborts_build_without_side_effects() -> None:
    """A bad line after a good one leaves the whole invoice unchanged."""
    good = _line("10", "2")
    invoice = Invoice(
        currency_code="EUR",
        line_items=[good, LineItem(quantity="lots", cost=Decimal("10"))],
    )

    with pytest.raises(MalformedLineItemError):
        _build(invoice)

    assert good.line_total == Decimal("0")
    assert invoice.amount == Decimal("0")
