"""MySQL / MariaDB database introspector."""

import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from ..errors import DatabaseConnectionError, IntrospectionError
from .base import DatabaseIntrospector
from .models import RawColumn

logger = logging.getLogger(__name__)

# Client error codes meaning the server is gone
CONNECTION_LOST_CODES = {2003, 2006, 2013}


class MySQLIntrospector(DatabaseIntrospector):
    """Client for introspecting a MySQL or MariaDB database."""

    DIALECT = "mysql"

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
        self.port = port or 3306
        self.user = user
        self.password = password
        self._connection = None

    def connect(self):
        """Connect to MySQL."""
        if self._connection is not None:
            return self._connection

        try:
            import pymysql
        except ImportError:
            raise ImportError(
                "pymysql is required for MySQL. "
                "Install it with: pip install pymysql"
            )

        try:
            self._connection = pymysql.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password or "",
                database=self.database,
                cursorclass=pymysql.cursors.DictCursor,
                autocommit=True,
            )
        except pymysql.err.OperationalError as e:
            raise DatabaseConnectionError(
                f"Cannot connect to MySQL at {self.host}:{self.port}: {e}",
                details={"host": self.host, "port": self.port, "database": self.database},
            ) from e
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
            import pymysql

            try:
                with conn.cursor() as cursor:
                    cursor.execute(sql, params)
                    return [dict(row) for row in cursor.fetchall()]
            except pymysql.err.OperationalError as e:
                if e.args and e.args[0] in CONNECTION_LOST_CODES:
                    self._connection = None
                    raise self._mark_connection_lost(DatabaseConnectionError(
                        f"Lost connection to MySQL: {e}",
                        details={"table": table, "operation": operation},
                    )) from e
                raise IntrospectionError(str(e), table=table, operation=operation) from e
            except pymysql.err.MySQLError as e:
                raise IntrospectionError(str(e), table=table, operation=operation) from e

    def list_tables(self, schema: Optional[str] = None) -> List[str]:
        """Get base tables of the database (or of ``schema``)."""
        rows = self._execute_query(
            """
            SELECT TABLE_NAME AS table_name
            FROM INFORMATION_SCHEMA.TABLES
            WHERE TABLE_SCHEMA = %s AND TABLE_TYPE = 'BASE TABLE'
            ORDER BY TABLE_NAME
            """,
            (schema or self.database,),
            operation="list_tables",
        )
        return [row["table_name"] for row in rows]

    def describe_table(self, table: str, schema: Optional[str] = None) -> "OrderedDict[str, RawColumn]":
        """Describe columns; COLUMN_TYPE keeps length, unsigned and zerofill."""
        rows = self._execute_query(
            """
            SELECT COLUMN_NAME AS column_name,
                   COLUMN_TYPE AS column_type,
                   IS_NULLABLE AS is_nullable,
                   COLUMN_DEFAULT AS column_default,
                   COLUMN_KEY AS column_key
            FROM INFORMATION_SCHEMA.COLUMNS
            WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s
            ORDER BY ORDINAL_POSITION
            """,
            (schema or self.database, table),
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
            columns[row["column_name"]] = RawColumn(
                name=row["column_name"],
                data_type=(row["column_type"] or "").upper(),
                allow_null=row["is_nullable"] == "YES",
                default_value=row["column_default"],
                primary_key=row["column_key"] == "PRI",
            )
        return columns

    def query_raw(self, sql: str) -> List[Dict[str, Any]]:
        """Run a query and return rows as dictionaries."""
        return self._execute_query(sql, operation="query_raw")
