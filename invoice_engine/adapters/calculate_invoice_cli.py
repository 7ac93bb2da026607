"""CLI adapter to calculate the totals of an invoice JSON document.

This module wires the CalculateInvoiceUseCase to the configured adapters
and prints the computed totals.
"""

import argparse
import json

from invoice_engine.adapters.invoice_json import (
    load_invoice,
    result_to_dict,
)
from invoice_engine.domain.errors import InvoiceEngineError
from invoice_engine.infrastructure.container import (
    build_calculate_invoice_use_case,
)
from invoice_engine.infrastructure.logging.logger import get_app_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="invoice-engine-calculate",
        description="Calculate invoice totals from a JSON document.",
    )
    parser.add_argument("invoice", help="Path to the invoice JSON document.")
    parser.add_argument(
        "--save",
        action="store_true",
        help="Persist the calculated invoice through the configured backend.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the totals as JSON instead of text.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the invoice calculation and print the totals.

    Args:
        argv: Optional argument list, defaults to ``sys.argv[1:]``.

    Returns:
        int: Process exit code.
    """
    args = _build_parser().parse_args(argv)
    logger = get_app_logger()

    try:
        invoice = load_invoice(args.invoice)
        use_case = build_calculate_invoice_use_case(persist=args.save)
        result = use_case.execute(invoice, save=args.save)
    except (InvoiceEngineError, RuntimeError, OSError, ValueError) as exc:
        logger.error(str(exc))
        return 1

    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
        return 0

    print(f"Invoice {invoice.number or '(draft)'} ({invoice.currency_code})")
    print(f"Subtotal: {result.sub_total}")
    print(f"Discount: {result.total_discount}")
    print(f"Surcharges: {result.total_custom_values}")
    for entry in result.tax_map:
        print(f"  {entry.name}: {entry.total}")
    print(f"Taxes: {result.total_taxes}")
    print(f"Total: {result.amount}")
    print(f"Balance: {result.balance}")
    if result.partial is not None:
        print(f"Partial: {result.partial}")
    if args.save:
        print(f"Saved invoice id={invoice.id}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
