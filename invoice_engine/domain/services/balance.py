"""Balance and partial-payment resolution."""

from dataclasses import dataclass
from decimal import Decimal

from invoice_engine.domain.constants import PARTIAL_PRECISION
from invoice_engine.utils.decimal_utils import round_money


@dataclass(frozen=True)
class ResolvedBalance:
    """New amount and balance for an invoice."""

    amount: Decimal
    balance: Decimal


def resolve_balance(
    total: Decimal,
    previous_amount: Decimal,
    previous_balance: Decimal,
    precision: int,
) -> ResolvedBalance:
    """Reconcile a new grand total with payments already recorded.

    When the previous amount and balance differ, their difference is the
    amount paid to date and is subtracted from the new total.

    Args:
        total: Newly computed grand total at full precision.
        previous_amount: Amount persisted before this calculation.
        previous_balance: Balance persisted before this calculation.
        precision: Currency decimal places.

    Returns:
        ResolvedBalance: Rounded amount and the matching balance.
    """
    amount = round_money(total, precision)
    if previous_amount != previous_balance:
        paid_to_date = previous_amount - previous_balance
        balance = amount - paid_to_date
    else:
        balance = amount
    return ResolvedBalance(amount=amount, balance=balance)


def resolve_partial(partial: Decimal, balance: Decimal) -> Decimal:
    """Clamp a requested deposit into ``[0, balance]``.

    Args:
        partial: Requested deposit amount.
        balance: Invoice balance after recalculation.

    Returns:
        Decimal: Deposit rounded to two places and clamped.
    """
    requested = round_money(partial, PARTIAL_PRECISION)
    return max(Decimal("0"), min(requested, balance))


__all__ = ["ResolvedBalance", "resolve_balance", "resolve_partial"]
