"""Mapping between JSON invoice documents and domain models."""

import json
from pathlib import Path
from typing import Any

from invoice_engine.domain.errors import (
    InvalidInvoiceError,
    InvalidTaxRateError,
    MalformedLineItemError,
)
from invoice_engine.domain.models import (
    ComputationResult,
    Discount,
    Invoice,
    LineItem,
    Surcharge,
    TaxRate,
)
from invoice_engine.utils.decimal_utils import parse_decimal


def _money(raw, field_name: str, default: str | None = "0"):
    if raw is None:
        return None if default is None else parse_decimal(default)
    value = parse_decimal(raw)
    if value is None:
        raise InvalidInvoiceError(f"Field '{field_name}' is not numeric: {raw!r}")
    return value


def _invoice_id(raw) -> int | None:
    if raw is None:
        return None
    value = parse_decimal(raw)
    if value is None or value != value.to_integral_value():
        raise InvalidInvoiceError(f"Field 'id' is not a whole number: {raw!r}")
    return int(value)


def _tax_rates(raw_taxes: list[dict[str, Any]] | None, where: str) -> list[TaxRate]:
    taxes = []
    for raw in raw_taxes or []:
        name = str(raw.get("name", "")).strip()
        rate = parse_decimal(raw.get("rate", 0))
        if rate is None:
            raise InvalidTaxRateError(
                f"{where}: tax rate for '{name}' is not numeric: "
                f"{raw.get('rate')!r}"
            )
        taxes.append(TaxRate(name=name, rate=rate))
    return taxes


def _line_item(raw: dict[str, Any], position: int) -> LineItem:
    values = {}
    for field_name in ("quantity", "cost", "discount"):
        value = raw.get(field_name, 0)
        parsed = parse_decimal(value) if value is not None else parse_decimal(0)
        if parsed is None:
            raise MalformedLineItemError(
                f"Line item {position} has a non-numeric {field_name}: {value!r}"
            )
        values[field_name] = parsed
    return LineItem(
        quantity=values["quantity"],
        cost=values["cost"],
        discount=values["discount"],
        taxes=_tax_rates(raw.get("taxes"), f"Line item {position}"),
        is_taxable=bool(raw.get("is_taxable", True)),
        product_key=str(raw.get("product_key", "")),
        notes=str(raw.get("notes", "")),
    )


def _surcharge(raw: dict[str, Any] | None, slot: int) -> Surcharge:
    if raw is None:
        return Surcharge()
    return Surcharge(
        value=_money(raw.get("value"), f"surcharges[{slot}].value", default=None),
        is_percentage=bool(raw.get("is_percentage", False)),
        is_taxable=bool(raw.get("is_taxable", False)),
    )


def invoice_from_dict(payload: dict[str, Any]) -> Invoice:
    """Build an :class:`Invoice` from a decoded JSON document.

    Args:
        payload: Decoded invoice document.

    Returns:
        Invoice: Domain invoice.

    Raises:
        InvalidInvoiceError: If a monetary field is not numeric or the id
            is not a whole number.
        InvalidTaxRateError: If a tax rate is not numeric.
        MalformedLineItemError: If a line item field is not numeric.
    """
    currency_code = payload.get("currency_code")
    if not currency_code:
        raise InvalidInvoiceError("Field 'currency_code' is required")
    raw_discount = payload.get("discount") or {}
    return Invoice(
        id=_invoice_id(payload.get("id")),
        number=payload.get("number"),
        currency_code=str(currency_code).upper(),
        line_items=[
            _line_item(raw, position)
            for position, raw in enumerate(payload.get("line_items") or [], start=1)
        ],
        taxes=_tax_rates(payload.get("taxes"), "Invoice"),
        surcharges=[
            _surcharge(raw, slot)
            for slot, raw in enumerate(payload.get("surcharges") or [], start=1)
        ],
        discount=Discount(
            value=_money(raw_discount.get("value"), "discount.value"),
            is_amount=bool(raw_discount.get("is_amount", False)),
        ),
        uses_inclusive_taxes=bool(payload.get("uses_inclusive_taxes", False)),
        amount=_money(payload.get("amount"), "amount"),
        balance=_money(payload.get("balance"), "balance"),
        partial=_money(payload.get("partial"), "partial", default=None),
    )


def load_invoice(path: Path | str) -> Invoice:
    """Read an invoice JSON document from disk.

    Args:
        path: Path to the JSON document.

    Returns:
        Invoice: Domain invoice.
    """
    with Path(path).open(encoding="utf-8") as handle:
        return invoice_from_dict(json.load(handle))


def result_to_dict(result: ComputationResult) -> dict[str, Any]:
    """Render a computation result with string amounts for JSON output."""
    return {
        "sub_total": str(result.sub_total),
        "total_discount": str(result.total_discount),
        "total_custom_values": str(result.total_custom_values),
        "total_taxes": str(result.total_taxes),
        "tax_map": [
            {"name": entry.name, "total": str(entry.total), "source": entry.source}
            for entry in result.tax_map
        ],
        "total": str(result.total),
        "amount": str(result.amount),
        "balance": str(result.balance),
        "partial": None if result.partial is None else str(result.partial),
    }


__all__ = ["invoice_from_dict", "load_invoice", "result_to_dict"]
