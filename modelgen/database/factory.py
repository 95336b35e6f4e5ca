"""Factory for creating the introspector of a configured engine."""

from typing import Any, Dict, List, Optional

from ..errors import ConfigurationError, UnsupportedDialectError
from .base import DatabaseIntrospector
from .mysql import MySQLIntrospector
from .postgres import PostgresIntrospector
from .sqlite import SQLiteIntrospector


class IntrospectorFactory:
    """Creates a ``DatabaseIntrospector`` from an engine name and settings."""

    @staticmethod
    def create_introspector(
        dialect: str,
        database: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        storage: Optional[str] = None,
    ) -> DatabaseIntrospector:
        """Create an introspector for ``dialect``."""
        name = (dialect or "").lower()
        if name == "sqlite":
            storage = storage or database
            if not storage:
                raise ConfigurationError("SQLite requires a storage path (--storage or --database)")
            return SQLiteIntrospector(storage=storage)

        if not database:
            raise ConfigurationError(f"A database name is required for {name}")

        if name in ("postgres", "postgresql"):
            return PostgresIntrospector(
                database=database, host=host or "localhost", port=port, user=user, password=password
            )
        elif name in ("mysql", "mariadb"):
            return MySQLIntrospector(
                database=database, host=host or "localhost", port=port, user=user, password=password
            )
        raise UnsupportedDialectError(dialect, IntrospectorFactory.get_supported_types())

    @staticmethod
    def get_supported_types() -> List[str]:
        """Engine names with an introspection adapter."""
        return ["postgres", "postgresql", "mysql", "mariadb", "sqlite"]

    @staticmethod
    def get_required_config(dialect: str) -> List[str]:
        """Required connection settings for an engine."""
        configs: Dict[str, Any] = {
            "postgres": ["host", "database", "user"],
            "postgresql": ["host", "database", "user"],
            "mysql": ["host", "database", "user"],
            "mariadb": ["host", "database", "user"],
            "sqlite": ["storage"],
        }
        return configs.get((dialect or "").lower(), [])
