"""Shared pytest fixtures for modelgen tests."""

import sqlite3

import pytest

from modelgen.database.models import GenerationOptions, RawColumn
from modelgen.logging.run_service import RunLogger

from fixtures.fake_introspector import FakeIntrospector, make_columns


SHOP_SCHEMA_SQL = """
CREATE TABLE customers (
    id INTEGER PRIMARY KEY,
    email VARCHAR(255) NOT NULL UNIQUE,
    full_name TEXT,
    createdAt DATETIME NOT NULL,
    updatedAt DATETIME
);

CREATE TABLE orders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    customer_id INTEGER NOT NULL REFERENCES customers(id),
    status VARCHAR(20) NOT NULL DEFAULT 'new',
    total DECIMAL(10,2),
    metadata JSON,
    shipped_on DATE
);
"""


@pytest.fixture
def shop_db(tmp_path):
    """Create a SQLite database file with customers and orders."""
    path = tmp_path / "shop.sqlite"
    conn = sqlite3.connect(str(path))
    conn.executescript(SHOP_SCHEMA_SQL)
    conn.close()
    return str(path)


@pytest.fixture
def customers_columns():
    """Column metadata for a customers table."""
    return make_columns(
        RawColumn(name="id", data_type="INTEGER", allow_null=False, primary_key=True),
        RawColumn(name="email", data_type="CHARACTER VARYING(255)", allow_null=False),
        RawColumn(name="full_name", data_type="TEXT"),
        RawColumn(name="createdAt", data_type="TIMESTAMP WITH TIME ZONE", allow_null=False),
        RawColumn(name="updatedAt", data_type="TIMESTAMP WITH TIME ZONE"),
    )


@pytest.fixture
def orders_columns():
    """Column metadata for an orders table."""
    return make_columns(
        RawColumn(name="id", data_type="INTEGER", allow_null=False, primary_key=True,
                  default_value="nextval('orders_id_seq'::regclass)"),
        RawColumn(name="customer_id", data_type="INTEGER", allow_null=False),
        RawColumn(name="status", data_type="USER-DEFINED", allow_null=False,
                  special=["new", "paid", "shipped"]),
        RawColumn(name="total", data_type="NUMERIC(10,2)"),
    )


@pytest.fixture
def postgres_key_rows():
    """Postgres pg_constraint rows for customers and orders."""
    return {
        "customers": [
            {"constraint_name": "customers_pkey", "source_schema": "public", "source_table": "customers",
             "source_column": "id", "target_schema": None, "target_table": None, "target_column": None,
             "contype": "p", "extra": "nextval('customers_id_seq'::regclass)"},
            {"constraint_name": "customers_email_key", "source_schema": "public", "source_table": "customers",
             "source_column": "email", "target_schema": None, "target_table": None, "target_column": None,
             "contype": "u", "extra": None},
        ],
        "orders": [
            {"constraint_name": "orders_pkey", "source_schema": "public", "source_table": "orders",
             "source_column": "id", "target_schema": None, "target_table": None, "target_column": None,
             "contype": "p", "extra": "nextval('orders_id_seq'::regclass)"},
            {"constraint_name": "orders_customer_id_fkey", "source_schema": "public", "source_table": "orders",
             "source_column": "customer_id", "target_schema": "public", "target_table": "customers",
             "target_column": "id", "contype": "f", "extra": None},
        ],
    }


@pytest.fixture
def fake_shop(customers_columns, orders_columns, postgres_key_rows):
    """Fake postgres introspector serving customers and orders."""
    return FakeIntrospector(
        tables={"customers": customers_columns, "orders": orders_columns},
        foreign_key_rows=postgres_key_rows,
    )


@pytest.fixture
def default_options():
    """Generation options with everything at its default."""
    return GenerationOptions()


@pytest.fixture
def run_logger(tmp_path):
    """Run logger writing to a temporary database."""
    return RunLogger(db_path=str(tmp_path / "runs.db"))
