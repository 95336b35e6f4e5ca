"""Abstract base class for database introspection."""

import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from ..errors import DatabaseConnectionError
from .dialects import Dialect, get_dialect
from .models import RawColumn


class DatabaseIntrospector(ABC):
    """Abstract base class for database introspection.

    Subclasses talk to one engine's driver. Every public method may be called
    from several worker threads at once, so drivers are used under ``_lock``.
    """

    # Engine name used to look up the dialect
    DIALECT: str = ""

    def __init__(self, database: Optional[str] = None):
        self.database = database
        self._lock = threading.RLock()
        # Set once the connection drops; the introspector stays unusable after that
        self._connection_lost: Optional[DatabaseConnectionError] = None

    def _mark_connection_lost(self, error: DatabaseConnectionError) -> DatabaseConnectionError:
        self._connection_lost = error
        return error

    def _check_connection(self) -> None:
        """Fail every call after the connection was lost instead of reconnecting."""
        if self._connection_lost is not None:
            raise DatabaseConnectionError(
                f"Connection already lost: {self._connection_lost.message}",
                details=dict(self._connection_lost.details),
            )

    @property
    def dialect(self) -> Optional[Dialect]:
        return get_dialect(self.DIALECT)

    @abstractmethod
    def connect(self):
        """Establish connection to the database."""
        pass

    @abstractmethod
    def close(self):
        """Close the database connection."""
        pass

    @abstractmethod
    def list_tables(self, schema: Optional[str] = None) -> List[str]:
        """Get all table names.

        Args:
            schema: Optional schema to restrict the listing to

        Returns:
            List of table names
        """
        pass

    @abstractmethod
    def describe_table(self, table: str, schema: Optional[str] = None) -> "OrderedDict[str, RawColumn]":
        """Describe a table's columns.

        Args:
            table: Table name
            schema: Optional schema name

        Returns:
            Column metadata keyed by column name, in column order
        """
        pass

    @abstractmethod
    def query_raw(self, sql: str) -> List[Dict[str, Any]]:
        """Run a query and return rows as dictionaries keyed by field name."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
