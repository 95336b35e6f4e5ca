"""SQLite database introspector."""

import logging
import sqlite3
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import DatabaseConnectionError, IntrospectionError
from .base import DatabaseIntrospector
from .dialects import quote_literal
from .models import RawColumn

logger = logging.getLogger(__name__)


class SQLiteIntrospector(DatabaseIntrospector):
    """Client for introspecting a SQLite database file."""

    DIALECT = "sqlite"

    def __init__(self, storage: str = ":memory:", database: Optional[str] = None):
        """Initialize SQLite introspector.

        Args:
            storage: Path to the database file (or :memory:)
            database: Logical database name; defaults to the file stem
        """
        if database is None:
            database = "main" if storage == ":memory:" else Path(storage).stem
        super().__init__(database=database)
        self.storage = storage
        self._connection: Optional[sqlite3.Connection] = None

    def connect(self):
        """Open the database file."""
        if self._connection is not None:
            return self._connection

        if self.storage != ":memory:" and not Path(self.storage).exists():
            raise DatabaseConnectionError(
                f"SQLite database not found: {self.storage}",
                details={"storage": self.storage},
            )
        try:
            self._connection = sqlite3.connect(self.storage, check_same_thread=False)
        except sqlite3.Error as e:
            raise DatabaseConnectionError(
                f"Cannot open SQLite database {self.storage}: {e}",
                details={"storage": self.storage},
            ) from e
        self._connection.row_factory = sqlite3.Row
        logger.debug("Connected to SQLite database %s", self.storage)
        return self._connection

    def close(self):
        """Close the connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def _execute_query(self, sql: str, table: Optional[str] = None, operation: str = "query") -> List[sqlite3.Row]:
        with self._lock:
            conn = self.connect()
            try:
                return conn.execute(sql).fetchall()
            except sqlite3.Error as e:
                raise IntrospectionError(str(e), table=table, operation=operation) from e

    def list_tables(self, schema: Optional[str] = None) -> List[str]:
        """Get all user tables (SQLite has no schemas)."""
        rows = self._execute_query(
            """
            SELECT name FROM sqlite_master
            WHERE type = 'table' AND name NOT LIKE 'sqlite_%'
            ORDER BY name
            """,
            operation="list_tables",
        )
        return [row["name"] for row in rows]

    def describe_table(self, table: str, schema: Optional[str] = None) -> "OrderedDict[str, RawColumn]":
        """Describe columns using PRAGMA table_info."""
        rows = self._execute_query(
            f"PRAGMA table_info({quote_literal(table)})",
            table=table,
            operation="describe_table",
        )
        if not rows:
            raise IntrospectionError(
                f"No description found for table {table}",
                table=table,
                operation="describe_table",
            )

        columns: "OrderedDict[str, RawColumn]" = OrderedDict()
        for row in rows:
            columns[row["name"]] = RawColumn(
                name=row["name"],
                data_type=row["type"],
                allow_null=row["notnull"] == 0,
                default_value=row["dflt_value"],
                primary_key=row["pk"] > 0,
            )
        return columns

    def query_raw(self, sql: str) -> List[Dict[str, Any]]:
        """Run a query and return rows as dictionaries."""
        return [dict(row) for row in self._execute_query(sql, operation="query_raw")]
