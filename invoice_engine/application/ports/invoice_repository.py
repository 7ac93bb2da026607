"""Port for persisting calculated invoices."""

from typing import Protocol

from invoice_engine.domain.models import Invoice


class InvoiceRepositoryPort(Protocol):
    """Port exposing invoice storage."""

    def save(self, invoice: Invoice) -> Invoice:
        """Persist the invoice totals.

        New invoices receive their ``id`` from the repository.

        Returns:
            Invoice: The saved invoice.
        """

    def get(self, invoice_id: int) -> Invoice | None:
        """Return a saved invoice, or None when the id is unknown."""


__all__ = ["InvoiceRepositoryPort"]
