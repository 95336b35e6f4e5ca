"""Normalization of engine specific foreign key rows."""

import logging
import threading
from typing import Any, Dict, Iterable, Optional

from .dialects import Dialect
from .models import FOREIGN_SOURCE_FIELDS, ForeignKeyDescriptor, RawForeignKeyRow

logger = logging.getLogger(__name__)

# PRAGMA foreign_key_list column names -> canonical names
KEY_RENAMES = {
    "from": "source_column",
    "to": "target_column",
    "table": "target_table",
}


def _trimmed(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def merge_rows(previous: Optional[RawForeignKeyRow], current: RawForeignKeyRow) -> RawForeignKeyRow:
    """Field level union of two normalized rows.

    Keys present in ``current`` win; keys only present in ``previous`` are kept.
    Merging the same row twice is a no-op.
    """
    merged: RawForeignKeyRow = dict(previous or {})
    merged.update(current)
    return merged


class ForeignKeyResolver:
    """Turns raw foreign key query rows into per-column descriptors.

    Rows can be fed one table at a time from several threads; each table's
    running map is only touched under a lock.
    """

    def __init__(self, dialect: Optional[Dialect], database: Optional[str] = None):
        self.dialect = dialect
        self.database = database
        self._rows: Dict[str, Dict[str, RawForeignKeyRow]] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        """Whether the active dialect can report foreign keys at all."""
        return self.dialect is not None and callable(self.dialect.foreign_keys_query)

    def foreign_keys_query(self, table: str) -> Optional[str]:
        """SQL for this table's key rows, or None when the dialect has none."""
        if not self.enabled:
            return None
        return self.dialect.foreign_keys_query(table, self.database)

    def normalize_row(self, table: str, row: RawForeignKeyRow) -> RawForeignKeyRow:
        """Rename, default and flag a single raw row."""
        renamed = {KEY_RENAMES.get(key, key): value for key, value in dict(row).items()}

        ref: RawForeignKeyRow = {
            "source_table": table,
            "source_schema": self.database,
            "target_schema": self.database,
        }
        ref.update(renamed)

        for key in ("source_column", "target_column"):
            if isinstance(ref.get(key), str):
                ref[key] = ref[key].strip()

        if _trimmed(ref.get("source_column")) and _trimmed(ref.get("target_column")):
            ref["isForeignKey"] = True
            ref["foreignSources"] = {k: ref.get(k) for k in FOREIGN_SOURCE_FIELDS}

        if self.dialect is not None:
            if self.dialect.check("is_unique", ref):
                ref["isUnique"] = True
            if self.dialect.check("is_primary_key", ref):
                ref["isPrimaryKey"] = True
            if self.dialect.check("is_serial_key", ref):
                ref["isSerialKey"] = True

        return ref

    def add_row(self, table: str, row: RawForeignKeyRow) -> Optional[str]:
        """Normalize a row and merge it into the table's map.

        Returns the column the row was keyed under, or None if it had none.
        """
        ref = self.normalize_row(table, row)
        column = _trimmed(ref.get("source_column"))
        if not column:
            logger.debug("Skipping key row without source column for %s: %s", table, row)
            return None

        with self._lock:
            columns = self._rows.setdefault(table, {})
            previous = columns.get(column)
            if previous is not None:
                for key in ("target_table", "target_column"):
                    if key in ref and key in previous and ref[key] != previous[key]:
                        logger.debug(
                            "Key rows for %s.%s disagree on %s (%r -> %r); keeping the later value",
                            table, column, key, previous[key], ref[key],
                        )
            columns[column] = merge_rows(previous, ref)
        return column

    def resolve(self, table: str, rows: Iterable[RawForeignKeyRow]) -> Dict[str, ForeignKeyDescriptor]:
        """Feed all rows for a table and return its descriptors."""
        if not self.enabled:
            return {}
        for row in rows:
            self.add_row(table, row)
        return self.descriptors(table)

    def descriptors(self, table: str) -> Dict[str, ForeignKeyDescriptor]:
        """Current descriptors for one table keyed by column name."""
        with self._lock:
            columns = dict(self._rows.get(table, {}))
        return {name: ForeignKeyDescriptor.from_row(row) for name, row in columns.items()}

    def all_descriptors(self) -> Dict[str, Dict[str, ForeignKeyDescriptor]]:
        """Descriptors for every table seen so far."""
        with self._lock:
            tables = list(self._rows)
        return {table: self.descriptors(table) for table in tables}
