"""Database operations for generation run logging."""

import json
import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS runs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    run_id TEXT UNIQUE NOT NULL,
    timestamp TEXT NOT NULL,
    dialect TEXT,
    database_name TEXT,
    schema_filter TEXT,
    arguments TEXT,  -- JSON of command arguments
    status TEXT DEFAULT 'started',  -- 'started', 'success', 'partial', 'error'
    duration_ms INTEGER,

    tables_count INTEGER,
    models_count INTEGER,
    columns_count INTEGER,
    foreign_keys_count INTEGER,
    failed_tables TEXT,  -- JSON array of {table, operation, error}
    files_written TEXT,  -- JSON array of paths

    error_message TEXT,
    error_type TEXT,
    error_traceback TEXT,

    python_version TEXT,
    package_version TEXT,
    working_directory TEXT
);

CREATE INDEX IF NOT EXISTS idx_runs_timestamp ON runs(timestamp);
CREATE INDEX IF NOT EXISTS idx_runs_status ON runs(status);
CREATE INDEX IF NOT EXISTS idx_runs_dialect ON runs(dialect);
"""


def get_default_run_db_path() -> str:
    """Get the default database path (~/.modelgen/runs.db)."""
    modelgen_dir = Path.home() / ".modelgen"
    modelgen_dir.mkdir(exist_ok=True)
    return str(modelgen_dir / "runs.db")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RunDatabase:
    """SQLite database for generation run logging."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses default.
        """
        self.db_path = db_path or get_default_run_db_path()
        self._connection: Optional[sqlite3.Connection] = None
        self._initialized = False

    def _get_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            self._connection = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                isolation_level=None,  # Auto-commit mode
            )
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def initialize(self) -> None:
        """Initialize database schema."""
        if self._initialized:
            return

        try:
            conn = self._get_connection()
            conn.executescript(SCHEMA_SQL)
            self._initialized = True
            logger.debug("Run logging database initialized at %s", self.db_path)
        except Exception as e:
            logger.error("Failed to initialize run logging database: %s", e)
            raise

    def close(self) -> None:
        """Close database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def insert_run(
        self,
        run_id: str,
        dialect: Optional[str] = None,
        database_name: Optional[str] = None,
        schema_filter: Optional[str] = None,
        arguments: Optional[Dict[str, Any]] = None,
        python_version: Optional[str] = None,
        package_version: Optional[str] = None,
        working_directory: Optional[str] = None,
    ) -> int:
        """Insert a new run entry.

        Returns:
            The row ID of the inserted entry
        """
        self.initialize()
        conn = self._get_connection()

        cursor = conn.execute(
            """
            INSERT INTO runs (
                run_id, timestamp, dialect, database_name, schema_filter, arguments,
                status, python_version, package_version, working_directory
            )
            VALUES (?, ?, ?, ?, ?, ?, 'started', ?, ?, ?)
            """,
            (
                run_id, _now().isoformat(), dialect, database_name, schema_filter,
                json.dumps(arguments, default=str) if arguments else None,
                python_version, package_version, working_directory,
            ),
        )
        return cursor.lastrowid

    def update_build_results(
        self,
        run_id: str,
        tables_count: int,
        models_count: int,
        columns_count: int,
        foreign_keys_count: int,
        failed_tables: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        """Update run with introspection and synthesis results."""
        conn = self._get_connection()
        conn.execute(
            """
            UPDATE runs
            SET tables_count = ?, models_count = ?, columns_count = ?,
                foreign_keys_count = ?, failed_tables = ?
            WHERE run_id = ?
            """,
            (
                tables_count, models_count, columns_count, foreign_keys_count,
                json.dumps(failed_tables or []), run_id,
            ),
        )

    def update_files_written(self, run_id: str, files_written: List[str]) -> None:
        """Update run with the written model files."""
        conn = self._get_connection()
        conn.execute(
            "UPDATE runs SET files_written = ? WHERE run_id = ?",
            (json.dumps(files_written), run_id),
        )

    def update_success(self, run_id: str, duration_ms: int, status: str = "success") -> None:
        """Mark run as finished ('success', or 'partial' when some tables failed)."""
        conn = self._get_connection()
        conn.execute(
            "UPDATE runs SET status = ?, duration_ms = ? WHERE run_id = ?",
            (status, duration_ms, run_id),
        )

    def update_error(
        self,
        run_id: str,
        error_message: str,
        error_type: Optional[str] = None,
        error_traceback: Optional[str] = None,
        duration_ms: Optional[int] = None,
    ) -> None:
        """Mark run as failed with error details."""
        conn = self._get_connection()
        conn.execute(
            """
            UPDATE runs
            SET status = 'error', error_message = ?, error_type = ?,
                error_traceback = ?, duration_ms = ?
            WHERE run_id = ?
            """,
            (error_message, error_type, error_traceback, duration_ms, run_id),
        )

    def query_runs(
        self,
        status: Optional[str] = None,
        dialect: Optional[str] = None,
        since_hours: int = 24,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """Query run entries with optional filters, newest first."""
        self.initialize()
        conn = self._get_connection()

        conditions = ["timestamp >= ?"]
        params: List[Any] = [(_now() - timedelta(hours=since_hours)).isoformat()]

        if status:
            conditions.append("status = ?")
            params.append(status)

        if dialect:
            conditions.append("dialect = ?")
            params.append(dialect)

        params.extend([limit, offset])

        cursor = conn.execute(
            f"""
            SELECT * FROM runs
            WHERE {" AND ".join(conditions)}
            ORDER BY timestamp DESC
            LIMIT ? OFFSET ?
            """,
            params,
        )
        return [dict(row) for row in cursor.fetchall()]

    def get_run_by_id(self, run_id: str) -> Optional[Dict[str, Any]]:
        """Get a specific run by ID."""
        self.initialize()
        conn = self._get_connection()
        row = conn.execute("SELECT * FROM runs WHERE run_id = ?", (run_id,)).fetchone()
        return dict(row) if row else None

    def cleanup_old_runs(self, retention_days: int = 30) -> int:
        """Delete runs older than retention period.

        Returns:
            Number of deleted rows
        """
        self.initialize()
        conn = self._get_connection()
        cutoff = (_now() - timedelta(days=retention_days)).isoformat()
        cursor = conn.execute("DELETE FROM runs WHERE timestamp < ?", (cutoff,))
        deleted = cursor.rowcount
        if deleted > 0:
            logger.info("Cleaned up %d old run entries", deleted)
        return deleted
