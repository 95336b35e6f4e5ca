"""Per-engine query templates and key predicates.

Each supported engine is described by a plain ``Dialect`` record rather than a
subclass. Records are looked up once by engine name and never mutated.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

Predicate = Callable[[Mapping[str, Any]], bool]


def quote_literal(value: Optional[str]) -> str:
    """Render a value as a single-quoted SQL string literal."""
    if value is None:
        return "NULL"
    return "'" + str(value).replace("'", "''") + "'"


@dataclass(frozen=True)
class Dialect:
    """Engine specific introspection queries and foreign key row predicates."""
    name: str
    foreign_keys_query: Optional[Callable[[str, Optional[str]], str]] = None
    show_tables_query: Optional[Callable[[str], str]] = None
    is_unique: Optional[Predicate] = None
    is_primary_key: Optional[Predicate] = None
    is_serial_key: Optional[Predicate] = None
    user_defined_type: str = "USER-DEFINED"

    def check(self, predicate_name: str, row: Mapping[str, Any]) -> bool:
        """Apply a named predicate; a missing predicate counts as False."""
        predicate = getattr(self, predicate_name, None)
        if not callable(predicate):
            return False
        return bool(predicate(row))


# Postgres

def _postgres_foreign_keys_query(table: str, database: Optional[str] = None) -> str:
    return f"""
        SELECT
            o.conname AS constraint_name,
            (SELECT nspname FROM pg_catalog.pg_namespace WHERE oid = m.relnamespace) AS source_schema,
            m.relname AS source_table,
            (SELECT a.attname FROM pg_catalog.pg_attribute a
              WHERE a.attrelid = m.oid AND a.attnum = o.conkey[1] AND a.attisdropped = false) AS source_column,
            (SELECT nspname FROM pg_catalog.pg_namespace WHERE oid = f.relnamespace) AS target_schema,
            f.relname AS target_table,
            (SELECT a.attname FROM pg_catalog.pg_attribute a
              WHERE a.attrelid = f.oid AND a.attnum = o.confkey[1] AND a.attisdropped = false) AS target_column,
            o.contype,
            (SELECT pg_get_expr(d.adbin, d.adrelid) FROM pg_catalog.pg_attribute a
              LEFT JOIN pg_catalog.pg_attrdef d ON (a.attrelid, a.attnum) = (d.adrelid, d.adnum)
              WHERE NOT a.attisdropped AND a.attnum > 0
                AND a.attrelid = o.conrelid AND a.attnum = o.conkey[1]) AS extra
        FROM pg_catalog.pg_constraint o
        LEFT JOIN pg_catalog.pg_class f ON f.oid = o.confrelid
        LEFT JOIN pg_catalog.pg_class m ON m.oid = o.conrelid
        WHERE o.conrelid = (SELECT oid FROM pg_catalog.pg_class WHERE relname = {quote_literal(table)} LIMIT 1)
    """


def _postgres_show_tables_query(schema: str) -> str:
    return f"""
        SELECT table_name
        FROM information_schema.tables
        WHERE table_schema = {quote_literal(schema)}
          AND table_type LIKE '%TABLE'
          AND table_name != 'spatial_ref_sys'
        ORDER BY table_name
    """


def _postgres_is_serial_key(row: Mapping[str, Any]) -> bool:
    extra = row.get("extra")
    return (
        row.get("contype") == "p"
        and isinstance(extra, str)
        and extra.startswith("nextval")
    )


POSTGRES = Dialect(
    name="postgres",
    foreign_keys_query=_postgres_foreign_keys_query,
    show_tables_query=_postgres_show_tables_query,
    is_unique=lambda row: row.get("contype") == "u",
    is_primary_key=lambda row: row.get("contype") == "p",
    is_serial_key=_postgres_is_serial_key,
)


# MySQL / MariaDB

def _mysql_foreign_keys_query(table: str, database: Optional[str] = None) -> str:
    return f"""
        SELECT
            K.CONSTRAINT_NAME AS constraint_name,
            K.CONSTRAINT_SCHEMA AS source_schema,
            K.TABLE_NAME AS source_table,
            K.COLUMN_NAME AS source_column,
            K.REFERENCED_TABLE_SCHEMA AS target_schema,
            K.REFERENCED_TABLE_NAME AS target_table,
            K.REFERENCED_COLUMN_NAME AS target_column,
            C.EXTRA AS extra,
            C.COLUMN_KEY AS column_key
        FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE AS K
        LEFT JOIN INFORMATION_SCHEMA.COLUMNS AS C
          ON C.TABLE_NAME = K.TABLE_NAME
         AND C.COLUMN_NAME = K.COLUMN_NAME
         AND C.TABLE_SCHEMA = K.CONSTRAINT_SCHEMA
        WHERE K.TABLE_NAME = {quote_literal(table)}
          AND K.CONSTRAINT_SCHEMA = {quote_literal(database)}
    """


MYSQL = Dialect(
    name="mysql",
    foreign_keys_query=_mysql_foreign_keys_query,
    is_unique=lambda row: row.get("column_key") == "UNI",
    is_primary_key=lambda row: row.get("constraint_name") == "PRIMARY",
    is_serial_key=lambda row: row.get("extra") == "auto_increment",
)


# SQLite reports foreign keys through a PRAGMA with from/to/table columns.

def _sqlite_foreign_keys_query(table: str, database: Optional[str] = None) -> str:
    return f"PRAGMA foreign_key_list({quote_literal(table)})"


SQLITE = Dialect(
    name="sqlite",
    foreign_keys_query=_sqlite_foreign_keys_query,
)


# SQL Server

def _mssql_foreign_keys_query(table: str, database: Optional[str] = None) -> str:
    return f"""
        SELECT
            tc.CONSTRAINT_NAME AS constraint_name,
            tc.CONSTRAINT_TYPE AS constraint_type,
            kcu.TABLE_SCHEMA AS source_schema,
            kcu.TABLE_NAME AS source_table,
            kcu.COLUMN_NAME AS source_column,
            tkcu.TABLE_SCHEMA AS target_schema,
            tkcu.TABLE_NAME AS target_table,
            tkcu.COLUMN_NAME AS target_column,
            COLUMNPROPERTY(OBJECT_ID(kcu.TABLE_SCHEMA + '.' + kcu.TABLE_NAME),
                           kcu.COLUMN_NAME, 'IsIdentity') AS is_identity
        FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
        JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE kcu
          ON kcu.CONSTRAINT_NAME = tc.CONSTRAINT_NAME
         AND kcu.TABLE_NAME = tc.TABLE_NAME
        LEFT JOIN INFORMATION_SCHEMA.REFERENTIAL_CONSTRAINTS rc
          ON rc.CONSTRAINT_NAME = tc.CONSTRAINT_NAME
        LEFT JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE tkcu
          ON tkcu.CONSTRAINT_NAME = rc.UNIQUE_CONSTRAINT_NAME
         AND tkcu.ORDINAL_POSITION = kcu.ORDINAL_POSITION
        WHERE tc.TABLE_NAME = {quote_literal(table)}
    """


MSSQL = Dialect(
    name="mssql",
    foreign_keys_query=_mssql_foreign_keys_query,
    is_unique=lambda row: row.get("constraint_type") == "UNIQUE",
    is_primary_key=lambda row: row.get("constraint_type") == "PRIMARY KEY",
    is_serial_key=lambda row: bool(row.get("is_identity")),
)


DIALECTS: Dict[str, Dialect] = {
    "postgres": POSTGRES,
    "postgresql": POSTGRES,
    "mysql": MYSQL,
    "mariadb": MYSQL,
    "sqlite": SQLITE,
    "mssql": MSSQL,
}


def get_dialect(name: Optional[str]) -> Optional[Dialect]:
    """Look up a dialect by engine name; unknown engines yield None."""
    if not name:
        return None
    return DIALECTS.get(name.lower())
