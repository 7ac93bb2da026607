"""Currency precision repositories."""

from sqlalchemy import text

from invoice_engine.application.ports.currency_repository import (
    CurrencyRepositoryPort,
)
from invoice_engine.application.ports.database import DatabaseEnginePort
from invoice_engine.domain.errors import MissingCurrencyPrecisionError


SELECT_PRECISION_SQL = text(
    """
    SELECT decimal_precision
    FROM currencies
    WHERE code = :code
    LIMIT 1
    """
)


class SqlAlchemyCurrencyRepository(CurrencyRepositoryPort):
    """Currency repository backed by the ``currencies`` table."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the invoicing engine.
        """
        self._db_port = db_port

    def fetch_precision(self, currency_code: str) -> int:
        engine = self._db_port.get_invoicing_engine()
        with engine.connect() as conn:
            row = conn.execute(
                SELECT_PRECISION_SQL,
                {"code": currency_code.upper()},
            ).first()
        if row is None or row.decimal_precision is None:
            raise MissingCurrencyPrecisionError(currency_code)
        return int(row.decimal_precision)


class InMemoryCurrencyRepository(CurrencyRepositoryPort):
    """Currency repository backed by a mapping of code to precision."""

    def __init__(self, precisions: dict[str, int]) -> None:
        self._precisions = {
            code.upper(): precision for code, precision in precisions.items()
        }

    def fetch_precision(self, currency_code: str) -> int:
        code = (currency_code or "").upper()
        if code not in self._precisions:
            raise MissingCurrencyPrecisionError(currency_code)
        return self._precisions[code]


__all__ = [
    "SqlAlchemyCurrencyRepository",
    "InMemoryCurrencyRepository",
    "SELECT_PRECISION_SQL",
]
