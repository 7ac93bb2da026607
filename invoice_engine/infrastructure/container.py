"""Composition root for wiring infrastructure adapters."""

from invoice_engine.application.ports.currency_repository import (
    CurrencyRepositoryPort,
)
from invoice_engine.application.ports.database import DatabaseEnginePort
from invoice_engine.application.ports.invoice_repository import (
    InvoiceRepositoryPort,
)
from invoice_engine.application.use_cases.calculate_invoice import (
    CalculateInvoiceUseCase,
)
from invoice_engine.infrastructure.currency_repository import (
    InMemoryCurrencyRepository,
    SqlAlchemyCurrencyRepository,
)
from invoice_engine.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from invoice_engine.infrastructure.invoice_repository import (
    InMemoryInvoiceRepository,
    SqlAlchemyInvoiceRepository,
)
from invoice_engine.infrastructure.logging.logger import get_app_logger
from invoice_engine.infrastructure.settings import InvoicingSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def _resolve_backend(settings: InvoicingSettings) -> str:
    if settings.backend in ("sqlalchemy", "memory"):
        return settings.backend
    raise ValueError(
        "Unsupported invoicing backend: "
        f"{settings.backend}. Expected sqlalchemy or memory."
    )


def build_currency_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: InvoicingSettings | None = None,
) -> CurrencyRepositoryPort:
    """Return the configured currency repository."""
    resolved_settings = settings or InvoicingSettings.from_env()
    if _resolve_backend(resolved_settings) == "memory":
        return InMemoryCurrencyRepository(resolved_settings.currency_precisions)
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyCurrencyRepository(resolved_db)


def build_invoice_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: InvoicingSettings | None = None,
) -> InvoiceRepositoryPort:
    """Return the configured invoice repository."""
    resolved_settings = settings or InvoicingSettings.from_env()
    if _resolve_backend(resolved_settings) == "memory":
        return InMemoryInvoiceRepository()
    resolved_db = db_port or build_database_adapter()
    repository = SqlAlchemyInvoiceRepository(resolved_db)
    repository.prepare_storage()
    return repository


def build_calculate_invoice_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: InvoicingSettings | None = None,
    persist: bool = False,
) -> CalculateInvoiceUseCase:
    """Return the calculate-invoice use case wired to configured adapters.

    Args:
        db_port: Optional database adapter override.
        settings: Optional settings override.
        persist: Also wire the invoice repository so results can be saved.

    Returns:
        CalculateInvoiceUseCase: Use case ready to execute.
    """
    resolved_settings = settings or InvoicingSettings.from_env()
    invoice_repository = None
    if persist:
        invoice_repository = build_invoice_repository(
            db_port,
            resolved_settings,
        )
    return CalculateInvoiceUseCase(
        currency_repository=build_currency_repository(
            db_port,
            resolved_settings,
        ),
        invoice_repository=invoice_repository,
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_currency_repository",
    "build_invoice_repository",
    "build_calculate_invoice_use_case",
]
