"""Database introspection module for modelgen.

This module provides the engine dialect registry, foreign key normalization,
type mapping, and introspection adapters for PostgreSQL, MySQL and SQLite.
"""

from .models import (
    RawColumn,
    Reference,
    ForeignKeyDescriptor,
    GenerationOptions,
    ColumnModel,
    TableModel,
)
from .dialects import Dialect, DIALECTS, get_dialect
from .foreign_keys import ForeignKeyResolver, merge_rows
from .type_mappers import TypeMapper, SemanticType, map_type
from .base import DatabaseIntrospector
from .sqlite import SQLiteIntrospector
from .postgres import PostgresIntrospector
from .mysql import MySQLIntrospector
from .factory import IntrospectorFactory

__all__ = [
    # Data models
    "RawColumn",
    "Reference",
    "ForeignKeyDescriptor",
    "GenerationOptions",
    "ColumnModel",
    "TableModel",
    # Dialects
    "Dialect",
    "DIALECTS",
    "get_dialect",
    # Key and type normalization
    "ForeignKeyResolver",
    "merge_rows",
    "TypeMapper",
    "SemanticType",
    "map_type",
    # Introspectors
    "DatabaseIntrospector",
    "SQLiteIntrospector",
    "PostgresIntrospector",
    "MySQLIntrospector",
    "IntrospectorFactory",
]
