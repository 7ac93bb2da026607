"""Database ports for the invoice engine.

This module defines the application-layer protocol for accessing the
database engine. Infrastructure implementations are expected to provide
concrete adapters that satisfy this port.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the invoicing database engine.

    Application use cases can depend on this protocol instead of concrete
    database drivers or configuration details.
    """

    def get_invoicing_engine(self) -> Engine:
        """Get the engine for the invoicing database.

        Returns:
            Engine: SQLAlchemy engine connected to the invoicing database.
        """


__all__ = ["DatabaseEnginePort"]
