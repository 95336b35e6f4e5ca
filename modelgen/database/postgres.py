"""PostgreSQL database introspector."""

import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from ..errors import DatabaseConnectionError, IntrospectionError
from .base import DatabaseIntrospector
from .dialects import POSTGRES
from .models import RawColumn

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "public"

DESCRIBE_TABLE_SQL = """
    SELECT
        pk.constraint_type AS constraint_type,
        c.column_name AS column_name,
        c.column_default AS column_default,
        c.is_nullable AS is_nullable,
        (CASE WHEN c.udt_name = 'hstore' THEN c.udt_name ELSE c.data_type END)
          || (CASE WHEN c.character_maximum_length IS NOT NULL
                   THEN '(' || c.character_maximum_length || ')' ELSE '' END) AS column_type,
        (SELECT array_agg(e.enumlabel ORDER BY e.enumsortorder)
           FROM pg_catalog.pg_type t
           JOIN pg_catalog.pg_enum e ON t.oid = e.enumtypid
          WHERE t.typname = c.udt_name) AS special
    FROM information_schema.columns c
    LEFT JOIN (
        SELECT tc.table_schema, tc.table_name, cu.column_name, tc.constraint_type
        FROM information_schema.table_constraints tc
        JOIN information_schema.key_column_usage cu
          ON tc.table_schema = cu.table_schema
         AND tc.table_name = cu.table_name
         AND tc.constraint_name = cu.constraint_name
        WHERE tc.constraint_type = 'PRIMARY KEY'
    ) pk
      ON pk.table_schema = c.table_schema
     AND pk.table_name = c.table_name
     AND pk.column_name = c.column_name
    WHERE c.table_name = %s
      AND c.table_schema = %s
    ORDER BY c.ordinal_position
"""


class PostgresIntrospector(DatabaseIntrospector):
    """Client for introspecting a PostgreSQL database."""

    DIALECT = "postgres"

    def __init__(
        self,
        database: str,
        host: str = "localhost",
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
    ):
        super().__init__(database=database)
        self.host = host
        self.port = port or 5432
        self.user = user
        self.password = password
        self._connection = None

    def connect(self):
        """Connect to PostgreSQL."""
        if self._connection is not None:
            return self._connection

        try:
            import psycopg2
        except ImportError:
            raise ImportError(
                "psycopg2 is required for PostgreSQL. "
                "Install it with: pip install psycopg2-binary"
            )

        try:
            self._connection = psycopg2.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                dbname=self.database,
            )
        except psycopg2.OperationalError as e:
            raise DatabaseConnectionError(
                f"Cannot connect to PostgreSQL at {self.host}:{self.port}: {e}",
                details={"host": self.host, "port": self.port, "database": self.database},
            ) from e
        self._connection.autocommit = True
        return self._connection

    def close(self):
        """Close the connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def _execute_query(
        self,
        sql: str,
        params: Optional[tuple] = None,
        table: Optional[str] = None,
        operation: str = "query",
    ) -> List[Dict[str, Any]]:
        with self._lock:
            self._check_connection()
            conn = self.connect()
            import psycopg2
            from psycopg2.extras import RealDictCursor

            try:
                with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                    cursor.execute(sql, params)
                    return [dict(row) for row in cursor.fetchall()]
            except (psycopg2.OperationalError, psycopg2.InterfaceError) as e:
                self._connection = None
                raise self._mark_connection_lost(DatabaseConnectionError(
                    f"Lost connection to PostgreSQL: {e}",
                    details={"table": table, "operation": operation},
                )) from e
            except psycopg2.Error as e:
                raise IntrospectionError(str(e).strip(), table=table, operation=operation) from e

    def list_tables(self, schema: Optional[str] = None) -> List[str]:
        """Get base tables of a schema (public by default)."""
        rows = self._execute_query(
            POSTGRES.show_tables_query(schema or DEFAULT_SCHEMA),
            operation="list_tables",
        )
        return [row["table_name"] for row in rows]

    def describe_table(self, table: str, schema: Optional[str] = None) -> "OrderedDict[str, RawColumn]":
        """Describe columns from information_schema, with enum labels."""
        rows = self._execute_query(
            DESCRIBE_TABLE_SQL,
            (table, schema or DEFAULT_SCHEMA),
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
            special = row.get("special")
            columns[row["column_name"]] = RawColumn(
                name=row["column_name"],
                data_type=(row["column_type"] or "").upper(),
                allow_null=row["is_nullable"] == "YES",
                default_value=row["column_default"],
                primary_key=row["constraint_type"] == "PRIMARY KEY",
                special=list(special) if special else None,
            )
        return columns

    def query_raw(self, sql: str) -> List[Dict[str, Any]]:
        """Run a query and return rows as dictionaries."""
        return self._execute_query(sql, operation="query_raw")
