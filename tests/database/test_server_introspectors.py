"""Tests for the PostgreSQL and MySQL introspectors that need no server."""

import psycopg2
import pymysql
import pytest

from modelgen.database import MySQLIntrospector, PostgresIntrospector
from modelgen.database.dialects import MYSQL, POSTGRES
from modelgen.errors import DatabaseConnectionError, IntrospectionError


class FailingConnection:
    """Connection whose cursors always raise the given error."""

    def __init__(self, error):
        self.error = error
        self.cursor_calls = 0

    def cursor(self, *args, **kwargs):
        self.cursor_calls += 1
        raise self.error

    def close(self):
        pass


def _refuse_reconnect():
    raise AssertionError("introspector reconnected after losing its connection")


class TestPostgresIntrospector:
    """Test PostgreSQL adapter setup."""

    def test_defaults(self):
        introspector = PostgresIntrospector(database="shop")

        assert introspector.port == 5432
        assert introspector.host == "localhost"
        assert introspector.dialect is POSTGRES

    def test_unreachable_server(self):
        """Test a refused connection is a connection error."""
        introspector = PostgresIntrospector(database="shop", host="127.0.0.1", port=1, user="nobody")

        with pytest.raises(DatabaseConnectionError) as exc_info:
            introspector.list_tables()

        assert exc_info.value.details["port"] == 1

    def test_lost_connection_is_final(self, monkeypatch):
        """Test calls after a dropped connection fail without reconnecting."""
        introspector = PostgresIntrospector(database="shop")
        introspector._connection = FailingConnection(
            psycopg2.OperationalError("server closed the connection unexpectedly")
        )

        with pytest.raises(DatabaseConnectionError):
            introspector.describe_table("orders")

        monkeypatch.setattr(introspector, "connect", _refuse_reconnect)
        with pytest.raises(DatabaseConnectionError) as exc_info:
            introspector.describe_table("customers")

        assert "already lost" in exc_info.value.message
        assert exc_info.value.details["table"] == "orders"


class TestMySQLIntrospector:
    """Test MySQL adapter setup."""

    def test_defaults(self):
        introspector = MySQLIntrospector(database="shop")

        assert introspector.port == 3306
        assert introspector.dialect is MYSQL

    def test_unreachable_server(self):
        """Test a refused connection is a connection error."""
        introspector = MySQLIntrospector(database="shop", host="127.0.0.1", port=1, user="nobody")

        with pytest.raises(DatabaseConnectionError):
            introspector.describe_table("orders")

    def test_lost_connection_is_final(self, monkeypatch):
        """Test calls after a dropped connection fail without reconnecting."""
        introspector = MySQLIntrospector(database="shop")
        dropped = FailingConnection(pymysql.err.OperationalError(2013, "Lost connection to MySQL server during query"))
        introspector._connection = dropped

        with pytest.raises(DatabaseConnectionError):
            introspector.query_raw("SELECT 1")

        monkeypatch.setattr(introspector, "connect", _refuse_reconnect)
        with pytest.raises(DatabaseConnectionError):
            introspector.list_tables()

        assert dropped.cursor_calls == 1

    def test_other_operational_errors_are_not_final(self):
        """Test a query error that keeps the connection does not end the run."""
        introspector = MySQLIntrospector(database="shop")
        introspector._connection = FailingConnection(pymysql.err.OperationalError(1054, "Unknown column"))

        with pytest.raises(IntrospectionError):
            introspector.query_raw("SELECT nope")

        assert introspector._connection_lost is None
