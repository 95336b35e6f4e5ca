"""Generation run logging service.

Records each ``generate`` run (counts, failed tables, written files, errors)
in a local SQLite database for later inspection with ``modelgen runs``.
"""

import logging
import os
import sys
import time
import traceback
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from modelgen.logging.run_db import RunDatabase

logger = logging.getLogger(__name__)

_run_logger: Optional["RunLogger"] = None


def get_run_logger() -> "RunLogger":
    """Get or create the global run logger configured from settings."""
    global _run_logger
    if _run_logger is None:
        from modelgen.config import settings

        _run_logger = RunLogger(
            db_path=settings.run_logging_db_path,
            enabled=settings.run_logging_enabled,
            retention_days=settings.run_logging_retention_days,
        )
    return _run_logger


@dataclass
class RunContext:
    """Context for a generation run."""

    run_id: str
    dialect: Optional[str] = None
    database_name: Optional[str] = None
    schema_filter: Optional[str] = None
    arguments: Dict[str, Any] = field(default_factory=dict)
    start_time: float = field(default_factory=time.time)

    # Populated during the run
    tables_count: int = 0
    models_count: int = 0
    columns_count: int = 0
    foreign_keys_count: int = 0
    failed_tables: List[Dict[str, Any]] = field(default_factory=list)
    files_written: List[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "partial" if self.failed_tables else "success"


class RunLogger:
    """High-level logger for generation runs.

    Example usage:
        with get_run_logger().log_run(dialect="postgres", database_name="shop") as ctx:
            result = builder.build()
            ctx.tables_count = len(result.tables)
            ctx.failed_tables = [...]
    """

    def __init__(self, db_path: Optional[str] = None, enabled: bool = True, retention_days: int = 30):
        self.enabled = enabled
        self._db: Optional[RunDatabase] = None

        if self.enabled:
            try:
                self._db = RunDatabase(db_path)
                self._db.initialize()
                self._db.cleanup_old_runs(retention_days)
            except Exception as e:
                logger.warning("Failed to initialize run logging: %s", e)
                self._db = None
                self.enabled = False

    @property
    def db(self) -> Optional[RunDatabase]:
        return self._db

    def _get_environment_info(self) -> Dict[str, str]:
        return {
            "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
            "package_version": self._get_package_version(),
            "working_directory": os.getcwd(),
        }

    def _get_package_version(self) -> str:
        try:
            from importlib.metadata import version
            return version("modelgen")
        except Exception:
            return "unknown"

    @contextmanager
    def log_run(
        self,
        dialect: Optional[str] = None,
        database_name: Optional[str] = None,
        schema_filter: Optional[str] = None,
        arguments: Optional[Dict[str, Any]] = None,
    ):
        """Context manager for logging a run.

        Yields:
            RunContext that can be updated during the run
        """
        ctx = RunContext(
            run_id=str(uuid.uuid4())[:8],
            dialect=dialect,
            database_name=database_name,
            schema_filter=schema_filter,
            arguments=arguments or {},
        )

        if not self.enabled or self._db is None:
            yield ctx
            return

        try:
            env_info = self._get_environment_info()
            self._db.insert_run(
                run_id=ctx.run_id,
                dialect=dialect,
                database_name=database_name,
                schema_filter=schema_filter,
                arguments=arguments,
                **env_info,
            )
        except Exception as e:
            logger.warning("Failed to log run start: %s", e)

        try:
            yield ctx
        except BaseException as e:
            duration_ms = int((time.time() - ctx.start_time) * 1000)
            try:
                self._update_run_results(ctx)
                self._db.update_error(
                    run_id=ctx.run_id,
                    error_message=str(e),
                    error_type=type(e).__name__,
                    error_traceback=traceback.format_exc(),
                    duration_ms=duration_ms,
                )
            except Exception as log_err:
                logger.warning("Failed to log run error: %s", log_err)
            logger.debug("Run %s failed after %dms: %s", ctx.run_id, duration_ms, e)
            raise

        duration_ms = int((time.time() - ctx.start_time) * 1000)
        try:
            self._update_run_results(ctx)
            self._db.update_success(ctx.run_id, duration_ms, status=ctx.status)
        except Exception as e:
            logger.warning("Failed to log run results: %s", e)
        logger.debug("Run %s finished (%s) in %dms", ctx.run_id, ctx.status, duration_ms)

    def _update_run_results(self, ctx: RunContext) -> None:
        if ctx.tables_count > 0 or ctx.failed_tables:
            self._db.update_build_results(
                run_id=ctx.run_id,
                tables_count=ctx.tables_count,
                models_count=ctx.models_count,
                columns_count=ctx.columns_count,
                foreign_keys_count=ctx.foreign_keys_count,
                failed_tables=ctx.failed_tables,
            )
        if ctx.files_written:
            self._db.update_files_written(ctx.run_id, ctx.files_written)

    def query_runs(
        self,
        status: Optional[str] = None,
        dialect: Optional[str] = None,
        since_hours: int = 24,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """Query runs with optional filters."""
        if not self.enabled or not self._db:
            return []
        return self._db.query_runs(status=status, dialect=dialect, since_hours=since_hours, limit=limit)

    def get_run(self, run_id: str) -> Optional[Dict[str, Any]]:
        """Get a specific run by ID."""
        if not self.enabled or not self._db:
            return None
        return self._db.get_run_by_id(run_id)


def log_run(
    dialect: Optional[str] = None,
    database_name: Optional[str] = None,
    schema_filter: Optional[str] = None,
    arguments: Optional[Dict[str, Any]] = None,
):
    """Convenience function to get a run logging context manager."""
    return get_run_logger().log_run(
        dialect=dialect,
        database_name=database_name,
        schema_filter=schema_filter,
        arguments=arguments,
    )
