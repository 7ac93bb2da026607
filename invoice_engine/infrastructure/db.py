"""Database infrastructure for the invoice engine.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine connected to the invoicing database. It belongs to the
infrastructure layer because it deals with external systems.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from invoice_engine.application.ports.database import DatabaseEnginePort


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine instance with health checks enabled.
    """
    return create_engine(
        db_url,
        pool_pre_ping=True,
        future=True,
    )


_invoicing_engine: Optional[Engine] = None


def get_invoicing_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the invoicing database.

    Returns:
        Engine: Lazily initialized engine connected to INVOICING_DB_URL.
    """
    global _invoicing_engine
    if _invoicing_engine is None:
        db_url = _get_env_var("INVOICING_DB_URL")
        _invoicing_engine = _create_engine(db_url)
    return _invoicing_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so application use cases can depend only on the protocol.
    """

    def get_invoicing_engine(self) -> Engine:
        """Get the engine for the invoicing database.

        Returns:
            Engine: SQLAlchemy engine connected to the invoicing database.
        """
        return get_invoicing_engine()


__all__ = [
    "get_invoicing_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
