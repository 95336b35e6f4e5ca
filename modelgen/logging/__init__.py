"""Run logging module for modelgen.

Persists generation runs to SQLite to help with debugging and auditing.
"""

from modelgen.logging.run_db import RunDatabase, get_default_run_db_path
from modelgen.logging.run_service import (
    RunContext,
    RunLogger,
    get_run_logger,
    log_run,
)

__all__ = [
    "RunDatabase",
    "get_default_run_db_path",
    "RunContext",
    "RunLogger",
    "get_run_logger",
    "log_run",
]
