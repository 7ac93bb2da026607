"""Port for currency precision lookups."""

from typing import Protocol


class CurrencyRepositoryPort(Protocol):
    """Port exposing read-only currency configuration."""

    def fetch_precision(self, currency_code: str) -> int:
        """Return the number of decimal places for a currency.

        Raises:
            MissingCurrencyPrecisionError: If the currency is unknown.
        """


__all__ = ["CurrencyRepositoryPort"]
