"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass, field
import os

import dotenv

from invoice_engine.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class InvoicingSettings:
    """Settings for selecting the storage backend.

    Attributes:
        backend: Backend identifier (sqlalchemy or memory).
        currency_precisions: Currency precisions used by the memory backend.
    """

    backend: str = "sqlalchemy"
    currency_precisions: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "InvoicingSettings":
        """Build settings from environment variables.

        Returns:
            InvoicingSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        backend = os.getenv("INVOICING_BACKEND", "sqlalchemy").strip().lower()
        logger = get_app_logger()
        precisions = cls._parse_precisions(
            os.getenv("INVOICING_CURRENCY_PRECISIONS", ""),
            logger=logger,
        )
        return cls(backend=backend, currency_precisions=precisions)

    @staticmethod
    def _parse_precisions(raw: str, logger) -> dict[str, int]:
        """Parse ``CODE:PRECISION`` pairs separated by commas.

        Args:
            raw: Raw environment value, e.g. ``"EUR:2,JPY:0"``.
            logger: Logger used for warnings.

        Returns:
            dict[str, int]: Precision per upper-cased currency code.
        """
        precisions: dict[str, int] = {}
        for chunk in raw.split(","):
            pair = chunk.strip()
            if not pair:
                continue
            code, _, value = pair.partition(":")
            code = code.strip().upper()
            value = value.strip()
            if not code or not value.isdigit():
                logger.warning(
                    f"Ignoring invalid currency precision entry '{pair}'. "
                    "Expected format CODE:PRECISION."
                )
                continue
            precisions[code] = int(value)
        return precisions


__all__ = ["InvoicingSettings"]
