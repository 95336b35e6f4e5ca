"""Two phase orchestration of introspection and synthesis across tables."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..database.base import DatabaseIntrospector
from ..database.foreign_keys import ForeignKeyResolver
from ..database.models import ForeignKeyDescriptor, GenerationOptions, RawColumn, TableModel
from ..database.type_mappers import TypeMapper
from ..errors import DatabaseConnectionError, IntrospectionError
from .synthesizer import ModelSynthesizer

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 10


@dataclass
class TableFailure:
    """A table that could not be introspected."""
    table: str
    operation: str
    error: str
    error_type: str = "IntrospectionError"


@dataclass
class BuildResult:
    """Outcome of one build: models that succeeded plus recorded failures."""
    tables: List[str] = field(default_factory=list)
    models: Dict[str, TableModel] = field(default_factory=dict)
    foreign_keys: Dict[str, Dict[str, ForeignKeyDescriptor]] = field(default_factory=dict)
    columns: Dict[str, Dict[str, RawColumn]] = field(default_factory=dict)
    failures: List[TableFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> List[str]:
        return [t for t in self.tables if t in self.models]

    @property
    def failed_tables(self) -> List[str]:
        return sorted({f.table for f in self.failures})

    @property
    def columns_count(self) -> int:
        return sum(len(m.columns) for m in self.models.values())

    @property
    def foreign_keys_count(self) -> int:
        return sum(
            1
            for descriptors in self.foreign_keys.values()
            for d in descriptors.values()
            if d.is_foreign_key
        )


class ModelBuilder:
    """Introspects a database and synthesizes a model per table.

    Foreign keys for all tables are resolved before any table is described,
    since synthesis reads the key map. Both phases fan out over a bounded
    thread pool; within a table, columns are processed in order.
    """

    def __init__(
        self,
        introspector: DatabaseIntrospector,
        options: Optional[GenerationOptions] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        on_table_done: Optional[Callable[[str, bool], None]] = None,
    ):
        self.introspector = introspector
        self.options = options or GenerationOptions()
        self.max_workers = max(1, max_workers)
        self.on_table_done = on_table_done
        self.dialect = introspector.dialect
        self.resolver = ForeignKeyResolver(self.dialect, introspector.database)
        self.synthesizer = ModelSynthesizer(
            self.options,
            TypeMapper(self.dialect.user_defined_type) if self.dialect else TypeMapper(),
        )
        self._lock = threading.Lock()

    def list_tables(self) -> List[str]:
        """List and filter table names. Failure here ends the run."""
        schema = self.options.schema
        try:
            if schema and self.dialect is not None and self.dialect.show_tables_query:
                rows = self.introspector.query_raw(self.dialect.show_tables_query(schema))
                names = [next(iter(row.values())) for row in rows if row]
            else:
                names = self.introspector.list_tables(schema)
        except IntrospectionError as e:
            raise IntrospectionError(
                f"Could not list tables: {e.message}",
                operation="list_tables",
                details=dict(e.details),
            ) from e
        return self.options.select_tables(names)

    def _record_failure(self, result: BuildResult, table: str, operation: str, error: Exception) -> None:
        logger.warning("Failed to %s for table %s: %s", operation.replace("_", " "), table, error)
        with self._lock:
            result.failures.append(TableFailure(
                table=table,
                operation=operation,
                error=str(error),
                error_type=type(error).__name__,
            ))

    def _map_foreign_keys(self, table: str, result: BuildResult) -> None:
        sql = self.resolver.foreign_keys_query(table)
        if sql is None:
            return
        try:
            rows = self.introspector.query_raw(sql)
        except DatabaseConnectionError:
            raise
        except Exception as e:
            self._record_failure(result, table, "foreign_keys", e)
            return
        descriptors = self.resolver.resolve(table, rows)
        with self._lock:
            result.foreign_keys[table] = descriptors

    def _map_table(self, table: str, result: BuildResult) -> None:
        try:
            columns = self.introspector.describe_table(table, self.options.schema)
        except DatabaseConnectionError:
            raise
        except Exception as e:
            self._record_failure(result, table, "describe_table", e)
            if self.on_table_done:
                self.on_table_done(table, False)
            return

        model = self.synthesizer.synthesize_table(table, columns, result.foreign_keys.get(table))
        with self._lock:
            result.columns[table] = columns
            result.models[table] = model
        if self.on_table_done:
            self.on_table_done(table, True)

    def _fan_out(self, func: Callable[[str, BuildResult], None], tables: List[str], result: BuildResult) -> None:
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(func, table, result) for table in tables]
            # Re-raise terminal failures from workers
            for future in futures:
                future.result()

    def build(self) -> BuildResult:
        """Run both phases and return the collected result."""
        result = BuildResult(tables=self.list_tables())
        logger.info("Building models for %d tables", len(result.tables))

        if self.resolver.enabled:
            self._fan_out(self._map_foreign_keys, result.tables, result)
        else:
            logger.debug("Dialect %s has no foreign key query", self.introspector.DIALECT or "unknown")

        self._fan_out(self._map_table, result.tables, result)

        logger.info(
            "Built %d models, %d failures",
            len(result.models),
            len(result.failures),
        )
        return result
