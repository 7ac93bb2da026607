"""Domain models for invoices and their line items."""

from dataclasses import dataclass, field
from decimal import Decimal

from invoice_engine.utils.decimal_utils import format_rate


@dataclass(frozen=True)
class TaxRate:
    """Named tax rate in percent. A rate of zero marks an inactive slot."""

    name: str
    rate: Decimal

    @property
    def is_active(self) -> bool:
        """Return True when the rate contributes tax."""
        return self.rate > 0

    @property
    def label(self) -> str:
        """Return the display name, e.g. ``"VAT 20%"``."""
        return f"{self.name} {format_rate(self.rate)}%"


@dataclass(frozen=True)
class Discount:
    """Invoice discount tagged as a fixed amount or a percentage.

    Attributes:
        value: Discount amount or percentage.
        is_amount: True for a fixed amount, False for a percentage.
    """

    value: Decimal = Decimal("0")
    is_amount: bool = False

    @property
    def is_percentage(self) -> bool:
        """Return True when the discount is a percentage."""
        return not self.is_amount


@dataclass(frozen=True)
class Surcharge:
    """User-defined surcharge slot.

    Attributes:
        value: Surcharge amount, or percentage of the subtotal. None when the
            slot is unused.
        is_percentage: True when ``value`` is a percentage of the subtotal.
        is_taxable: True when invoice taxes apply to the surcharge.
    """

    value: Decimal | None = None
    is_percentage: bool = False
    is_taxable: bool = False


@dataclass
class LineItem:
    """Billable row on an invoice.

    ``discount`` is read in the invoice's discount mode (amount or
    percentage). ``line_total`` is written by the line-item aggregator.
    """

    quantity: Decimal
    cost: Decimal
    discount: Decimal = Decimal("0")
    taxes: list[TaxRate] = field(default_factory=list)
    is_taxable: bool = True
    product_key: str = ""
    notes: str = ""
    line_total: Decimal = Decimal("0")


@dataclass
class Invoice:
    """Mutable invoice aggregate used as input and output of a calculation.

    Attributes:
        id: Persisted identity, None until the invoice is first saved.
        number: Optional invoice number.
        currency_code: Client currency used to look up rounding precision.
        line_items: Ordered billable rows.
        taxes: Invoice-level tax slots (up to three).
        surcharges: Custom surcharge slots (up to four).
        discount: Invoice-level discount.
        uses_inclusive_taxes: True when listed prices already contain tax.
        amount: Last computed grand total.
        balance: Amount still owed.
        partial: Requested deposit, only resolved before first save.
    """

    currency_code: str
    id: int | None = None
    number: str | None = None
    line_items: list[LineItem] = field(default_factory=list)
    taxes: list[TaxRate] = field(default_factory=list)
    surcharges: list[Surcharge] = field(default_factory=list)
    discount: Discount = field(default_factory=Discount)
    uses_inclusive_taxes: bool = False
    amount: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    partial: Decimal | None = None

    @property
    def is_amount_discount(self) -> bool:
        """Return True when the invoice discount is a fixed amount."""
        return self.discount.is_amount

    @property
    def paid_to_date(self) -> Decimal:
        """Return the amount already paid, derived from amount and balance."""
        return self.amount - self.balance


__all__ = ["TaxRate", "Discount", "Surcharge", "LineItem", "Invoice"]
