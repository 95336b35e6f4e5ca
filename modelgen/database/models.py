"""Data models for schema introspection and model synthesis."""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .type_mappers import SemanticType


# One row as returned by a dialect's foreign key query; keys vary per engine.
RawForeignKeyRow = Dict[str, Any]

# Key identity fields captured as ``foreign_sources`` for a real foreign key.
FOREIGN_SOURCE_FIELDS = (
    "source_table",
    "source_schema",
    "target_schema",
    "target_table",
    "source_column",
    "target_column",
)


@dataclass
class RawColumn:
    """Column metadata as described by the introspection layer."""
    name: str
    data_type: str
    allow_null: bool = True
    default_value: Optional[Any] = None
    primary_key: bool = False
    # Enum labels for user-defined enum types (postgres)
    special: Optional[List[str]] = None


@dataclass(frozen=True)
class Reference:
    """Target of a foreign key."""
    target_table: str
    target_column: str


@dataclass
class ForeignKeyDescriptor:
    """Normalized key facts for one (table, column)."""
    source_table: str
    source_column: str
    source_schema: Optional[str] = None
    target_table: Optional[str] = None
    target_schema: Optional[str] = None
    target_column: Optional[str] = None
    is_foreign_key: bool = False
    is_unique: bool = False
    is_primary_key: bool = False
    is_serial_key: bool = False
    foreign_sources: Optional[Dict[str, Any]] = None
    # Remaining dialect specific fields (constraint_name, contype, extra, ...)
    extra: Dict[str, Any] = field(default_factory=dict)

    _ROW_FIELDS = {
        "source_table": "source_table",
        "source_column": "source_column",
        "source_schema": "source_schema",
        "target_table": "target_table",
        "target_schema": "target_schema",
        "target_column": "target_column",
        "isForeignKey": "is_foreign_key",
        "isUnique": "is_unique",
        "isPrimaryKey": "is_primary_key",
        "isSerialKey": "is_serial_key",
        "foreignSources": "foreign_sources",
    }

    @classmethod
    def from_row(cls, row: RawForeignKeyRow) -> "ForeignKeyDescriptor":
        """Build a descriptor from a normalized (and merged) row."""
        kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in row.items():
            attr = cls._ROW_FIELDS.get(key)
            if attr is None:
                extra[key] = value
            elif attr.startswith("is_"):
                kwargs[attr] = bool(value)
            else:
                kwargs[attr] = value
        kwargs.setdefault("source_table", "")
        kwargs.setdefault("source_column", "")
        return cls(extra=extra, **kwargs)

    @property
    def reference(self) -> Optional[Reference]:
        """The referenced (table, column), if this column is a foreign key.

        Taken from ``foreign_sources`` so that a later non-referential row for
        the same column (a primary key constraint, say) cannot erase it.
        """
        if not self.is_foreign_key or not self.foreign_sources:
            return None
        return Reference(
            target_table=self.foreign_sources.get("target_table"),
            target_column=self.foreign_sources.get("target_column"),
        )


@dataclass(frozen=True)
class GenerationOptions:
    """Options for one generation run."""
    schema: Optional[str] = None
    camel_case: bool = False
    timestamps: bool = False
    created_at: Optional[str] = "createdAt"
    updated_at: Optional[str] = "updatedAt"
    deleted_at: Optional[str] = "deletedAt"
    tables: Optional[FrozenSet[str]] = None
    skip_tables: Optional[FrozenSet[str]] = None

    @property
    def timestamp_field_names(self) -> Tuple[str, ...]:
        """Configured timestamp column names that are enabled."""
        return tuple(n for n in (self.created_at, self.updated_at, self.deleted_at) if n)

    def select_tables(self, table_names: List[str]) -> List[str]:
        """Apply the include / exclude table filters, keeping input order."""
        if self.tables:
            return [t for t in table_names if t in self.tables]
        if self.skip_tables:
            return [t for t in table_names if t not in self.skip_tables]
        return list(table_names)


@dataclass
class ColumnModel:
    """Synthesized attribute definition for one column."""
    name: str
    rendered_name: str
    semantic_type: "SemanticType"
    allow_null: Optional[bool] = None
    is_primary_key: bool = False
    is_unique: bool = False
    is_auto_increment: bool = False
    reference: Optional[Reference] = None
    default_value_expression: Optional[str] = None
    # Original column name, set when the rendered name differs
    field_name: Optional[str] = None

    def attributes(self) -> "OrderedDict[str, Any]":
        """Attributes in emission order, omitting the ones that do not apply."""
        attrs: "OrderedDict[str, Any]" = OrderedDict()
        if self.is_auto_increment:
            attrs["autoIncrement"] = True
        if self.reference is not None:
            attrs["references"] = OrderedDict([
                ("model", self.reference.target_table),
                ("key", self.reference.target_column),
            ])
        if self.is_primary_key:
            attrs["primaryKey"] = True
        if self.allow_null is not None:
            attrs["allowNull"] = self.allow_null
        if self.default_value_expression is not None:
            attrs["defaultValue"] = self.default_value_expression
        attrs["type"] = self.semantic_type
        if self.is_unique:
            attrs["unique"] = True
        if self.field_name is not None:
            attrs["field"] = self.field_name
        return attrs


@dataclass
class TableModel:
    """Synthesized model for one table."""
    name: str
    table_name: str
    columns: List[ColumnModel] = field(default_factory=list)
    schema: Optional[str] = None
    timestamps: bool = False

    def options(self) -> "OrderedDict[str, Any]":
        """Table level options in emission order."""
        opts: "OrderedDict[str, Any]" = OrderedDict()
        if self.schema:
            opts["schema"] = self.schema
        opts["tableName"] = self.table_name
        opts["timestamps"] = self.timestamps
        return opts

    def get_column(self, name: str) -> Optional[ColumnModel]:
        """Find a column by original or rendered name."""
        for column in self.columns:
            if column.name == name or column.rendered_name == name:
                return column
        return None
