"""Invoice repositories persisting calculated totals."""

import copy

from sqlalchemy import text

from invoice_engine.application.ports.database import DatabaseEnginePort
from invoice_engine.application.ports.invoice_repository import (
    InvoiceRepositoryPort,
)
from invoice_engine.domain.models import Invoice
from invoice_engine.utils.decimal_utils import coerce_decimal


CREATE_INVOICES_SQL = """
CREATE TABLE IF NOT EXISTS invoices (
    id INTEGER PRIMARY KEY,
    number TEXT,
    currency_code TEXT NOT NULL,
    amount TEXT NOT NULL,
    balance TEXT NOT NULL,
    partial TEXT
)
"""

INSERT_INVOICE_SQL = text(
    """
    INSERT INTO invoices (number, currency_code, amount, balance, partial)
    VALUES (:number, :currency_code, :amount, :balance, :partial)
    RETURNING id
    """
)

INSERT_INVOICE_WITH_ID_SQL = text(
    """
    INSERT INTO invoices (id, number, currency_code, amount, balance, partial)
    VALUES (:id, :number, :currency_code, :amount, :balance, :partial)
    """
)

UPDATE_INVOICE_SQL = text(
    """
    UPDATE invoices
    SET number = :number,
        currency_code = :currency_code,
        amount = :amount,
        balance = :balance,
        partial = :partial
    WHERE id = :id
    """
)

SELECT_INVOICE_SQL = text(
    """
    SELECT id, number, currency_code, amount, balance, partial
    FROM invoices
    WHERE id = :id
    """
)


def _invoice_params(invoice: Invoice) -> dict[str, str | int | None]:
    return {
        "id": invoice.id,
        "number": invoice.number,
        "currency_code": invoice.currency_code,
        "amount": str(invoice.amount),
        "balance": str(invoice.balance),
        "partial": None if invoice.partial is None else str(invoice.partial),
    }


class SqlAlchemyInvoiceRepository(InvoiceRepositoryPort):
    """Invoice repository writing totals to the ``invoices`` table.

    Money columns are stored as text to keep the exact Decimal value.
    """

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the invoicing engine.
        """
        self._db_port = db_port

    def prepare_storage(self) -> None:
        """Ensure the invoices table exists."""
        engine = self._db_port.get_invoicing_engine()
        with engine.begin() as conn:
            conn.exec_driver_sql(CREATE_INVOICES_SQL)

    def save(self, invoice: Invoice) -> Invoice:
        """Insert or update the invoice totals.

        Args:
            invoice: Invoice to persist. New invoices get their ``id`` set.
                An invoice whose ``id`` has no stored row is inserted with
                that ``id``.

        Returns:
            Invoice: The same invoice instance.
        """
        params = _invoice_params(invoice)
        engine = self._db_port.get_invoicing_engine()
        with engine.begin() as conn:
            if invoice.id is None:
                invoice.id = conn.execute(INSERT_INVOICE_SQL, params).scalar_one()
            elif conn.execute(UPDATE_INVOICE_SQL, params).rowcount == 0:
                conn.execute(INSERT_INVOICE_WITH_ID_SQL, params)
        return invoice

    def get(self, invoice_id: int) -> Invoice | None:
        """Load the stored totals of an invoice.

        Line items, taxes and surcharges are not persisted; the returned
        invoice only carries its identity and totals.

        Args:
            invoice_id: Identifier assigned on insert.

        Returns:
            Invoice | None: Stored invoice, or None when the id is unknown.
        """
        engine = self._db_port.get_invoicing_engine()
        with engine.connect() as conn:
            row = conn.execute(SELECT_INVOICE_SQL, {"id": invoice_id}).first()
        if row is None:
            return None
        return Invoice(
            id=row.id,
            number=row.number,
            currency_code=row.currency_code,
            amount=coerce_decimal(row.amount),
            balance=coerce_decimal(row.balance),
            partial=None if row.partial is None else coerce_decimal(row.partial),
        )


class InMemoryInvoiceRepository(InvoiceRepositoryPort):
    """Invoice repository keeping copies of saved invoices in memory."""

    def __init__(self) -> None:
        self._invoices: dict[int, Invoice] = {}
        self._next_id = 1

    def save(self, invoice: Invoice) -> Invoice:
        if invoice.id is None:
            invoice.id = self._next_id
            self._next_id += 1
        else:
            self._next_id = max(self._next_id, invoice.id + 1)
        self._invoices[invoice.id] = copy.deepcopy(invoice)
        return invoice

    def get(self, invoice_id: int) -> Invoice | None:
        """Return a copy of a saved invoice, or None when unknown."""
        stored = self._invoices.get(invoice_id)
        return copy.deepcopy(stored) if stored is not None else None


__all__ = [
    "SqlAlchemyInvoiceRepository",
    "InMemoryInvoiceRepository",
    "CREATE_INVOICES_SQL",
    "INSERT_INVOICE_SQL",
    "INSERT_INVOICE_WITH_ID_SQL",
    "UPDATE_INVOICE_SQL",
    "SELECT_INVOICE_SQL",
]
