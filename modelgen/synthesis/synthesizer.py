"""Model synthesis from introspected columns and key descriptors."""

import logging
import re
from typing import Dict, List, Mapping, Optional

from ..database.models import (
    ColumnModel,
    ForeignKeyDescriptor,
    GenerationOptions,
    RawColumn,
    TableModel,
)
from ..database.type_mappers import TypeMapper

logger = logging.getLogger(__name__)

CURRENT_TIMESTAMP = "NOW()"

# Runs of anything that is not a letter or digit separate words
_SEPARATOR_PATTERN = re.compile(r"[\W_]+")


def _is_boundary(previous: str, char: str, following: str) -> bool:
    """Word break before ``char``: digit edge, ``aB``, or the ``B`` of ``ABc``."""
    if previous.isdigit() != char.isdigit():
        return True
    if previous.islower() and char.isupper():
        return True
    return previous.isupper() and char.isupper() and following.islower()


def split_words(name: str) -> List[str]:
    """Split an identifier into words, for any script."""
    words: List[str] = []
    for chunk in _SEPARATOR_PATTERN.split(name or ""):
        current = ""
        for i, char in enumerate(chunk):
            following = chunk[i + 1] if i + 1 < len(chunk) else ""
            if current and _is_boundary(current[-1], char, following):
                words.append(current)
                current = ""
            current += char
        if current:
            words.append(current)
    return words


def camel_case(name: str) -> str:
    """Convert an identifier to camelCase (``created_at`` -> ``createdAt``).

    Names with no letters or digits at all are returned unchanged.
    """
    words = split_words(name)
    if not words:
        return name or ""
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


class ModelSynthesizer:
    """Builds ``TableModel`` objects from raw column metadata.

    Synthesis is deterministic and side effect free; the same inputs always
    give equal models.
    """

    def __init__(self, options: Optional[GenerationOptions] = None, type_mapper: Optional[TypeMapper] = None):
        self.options = options or GenerationOptions()
        self.type_mapper = type_mapper or TypeMapper()

    def render_name(self, name: str) -> str:
        return camel_case(name) if self.options.camel_case else name

    def _is_managed_timestamp(self, name: str) -> bool:
        """Columns handled by the table level timestamp option."""
        return self.options.timestamps and name in self.options.timestamp_field_names

    def _has_timestamp_default(self, rendered_name: str) -> bool:
        return rendered_name in (self.options.created_at, self.options.updated_at)

    def synthesize_column(
        self,
        column: RawColumn,
        foreign_key: Optional[ForeignKeyDescriptor] = None,
    ) -> ColumnModel:
        """Synthesize a single column's attributes."""
        rendered_name = self.render_name(column.name)
        is_timestamp = self._has_timestamp_default(rendered_name)

        model = ColumnModel(
            name=column.name,
            rendered_name=rendered_name,
            semantic_type=self.type_mapper.map_type(column.data_type, column.special),
            allow_null=None if is_timestamp else column.allow_null,
            default_value_expression=CURRENT_TIMESTAMP if is_timestamp else None,
        )

        if foreign_key is not None:
            model.is_auto_increment = foreign_key.is_serial_key
            if foreign_key.is_foreign_key and not foreign_key.is_serial_key:
                model.reference = foreign_key.reference
            model.is_unique = foreign_key.is_unique

        model.is_primary_key = column.primary_key and (
            foreign_key is None or foreign_key.is_primary_key
        )

        if self.options.camel_case and rendered_name != column.name:
            model.field_name = column.name

        return model

    def synthesize_table(
        self,
        table: str,
        columns: Mapping[str, RawColumn],
        foreign_keys: Optional[Mapping[str, ForeignKeyDescriptor]] = None,
    ) -> TableModel:
        """Synthesize a table model.

        Args:
            table: Original table name
            columns: Column metadata in introspection order
            foreign_keys: Key descriptors for this table keyed by column name

        Returns:
            TableModel with ``id`` and managed timestamp columns removed
        """
        foreign_keys = foreign_keys or {}
        model = TableModel(
            name=self.render_name(table),
            table_name=table,
            schema=self.options.schema,
        )

        for name, column in columns.items():
            if name == "id":
                continue
            if self._is_managed_timestamp(name):
                logger.debug("Skipping timestamp column %s.%s", table, name)
                continue
            model.columns.append(self.synthesize_column(column, foreign_keys.get(name)))

        return model


def synthesize(
    tables: Mapping[str, Mapping[str, RawColumn]],
    foreign_keys: Mapping[str, Mapping[str, ForeignKeyDescriptor]],
    options: Optional[GenerationOptions] = None,
    type_mapper: Optional[TypeMapper] = None,
) -> Dict[str, TableModel]:
    """Synthesize models for every described table.

    Args:
        tables: Column metadata per table name
        foreign_keys: Key descriptors per table name, then column name
        options: Generation options
        type_mapper: Type mapper (defaults to the standard one)

    Returns:
        TableModel per table name
    """
    synthesizer = ModelSynthesizer(options, type_mapper)
    return {
        table: synthesizer.synthesize_table(table, columns, foreign_keys.get(table))
        for table, columns in tables.items()
    }
