"""Mapping of native column types to abstract semantic types."""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

LENGTH_PATTERN = re.compile(r"\(\d+\)")

BOOLEAN = "BOOLEAN"
INTEGER = "INTEGER"
BIGINT = "BIGINT"
TEXT = "TEXT"
CHAR = "CHAR"
REAL = "REAL"
FLOAT = "FLOAT"
DOUBLE = "DOUBLE"
DECIMAL = "DECIMAL"
DATE = "DATE"
UUID = "UUID"
JSON = "JSON"
JSONB = "JSONB"
GEOMETRY = "GEOMETRY"
ENUM = "ENUM"

SEMANTIC_TYPES = (
    BOOLEAN, INTEGER, BIGINT, TEXT, CHAR, REAL, FLOAT, DOUBLE,
    DECIMAL, DATE, UUID, JSON, JSONB, GEOMETRY, ENUM,
)


@dataclass(frozen=True)
class SemanticType:
    """Engine neutral column type.

    ``literal`` marks a native type that matched no rule and is passed through
    unchanged in ``name``.
    """
    name: str
    length: Optional[str] = None
    unsigned: bool = False
    zerofill: bool = False
    values: Tuple[str, ...] = ()
    literal: bool = False

    @property
    def is_enum(self) -> bool:
        return self.name == ENUM and not self.literal

    def expression(self, quote: str = '"') -> str:
        """Type expression such as ``INTEGER(11).UNSIGNED`` or ``ENUM("a","b")``."""
        if self.literal:
            return self.name
        if self.is_enum:
            return "ENUM(" + ",".join(quote + v + quote for v in self.values) + ")"
        expr = self.name + (self.length or "")
        if self.unsigned:
            expr += ".UNSIGNED"
        if self.zerofill:
            expr += ".ZEROFILL"
        return expr

    def __str__(self) -> str:
        return self.expression()


def _length(native_type: str) -> Optional[str]:
    match = LENGTH_PATTERN.search(native_type)
    return match.group(0) if match else None


def _integer(native_type: str, lowered: str) -> SemanticType:
    return SemanticType(
        INTEGER,
        length=_length(native_type),
        unsigned="unsigned" in lowered,
        zerofill="zerofill" in lowered,
    )


def _fixed(name: str) -> Callable[[str, str], SemanticType]:
    return lambda native_type, lowered: SemanticType(name)


def _with_length(name: str) -> Callable[[str, str], SemanticType]:
    return lambda native_type, lowered: SemanticType(name, length=_length(native_type))


def _matches(pattern: str) -> Callable[[str], bool]:
    compiled = re.compile(pattern)
    return lambda lowered: compiled.search(lowered) is not None


# Evaluated in order, first match wins. Patterns overlap, so order matters.
# jsonb is tested before json; with json first, jsonb columns would never map
# to JSONB.
TYPE_RULES: List[Tuple[Callable[[str], bool], Callable[[str, str], SemanticType]]] = [
    (lambda t: t in ("boolean", "bit(1)", "bit"), _fixed(BOOLEAN)),
    (_matches(r"^(smallint|mediumint|tinyint|int)"), _integer),
    (_matches(r"^bigint"), _fixed(BIGINT)),
    (_matches(r"^varchar"), _with_length(TEXT)),
    (_matches(r"^string|varying|nvarchar"), _fixed(TEXT)),
    (_matches(r"^char"), _with_length(CHAR)),
    (_matches(r"^real"), _fixed(REAL)),
    (_matches(r"text|ntext$"), _fixed(TEXT)),
    (_matches(r"^(date|time)"), _fixed(DATE)),
    (_matches(r"^(float|float4)"), _fixed(FLOAT)),
    (_matches(r"^decimal"), _fixed(DECIMAL)),
    (_matches(r"^(float8|double precision|numeric)"), _fixed(DOUBLE)),
    (_matches(r"^uuid|uniqueidentifier"), _fixed(UUID)),
    (_matches(r"^jsonb"), _fixed(JSONB)),
    (_matches(r"^json"), _fixed(JSON)),
    (_matches(r"^geometry"), _fixed(GEOMETRY)),
]


class TypeMapper:
    """Maps native type strings (with modifiers) to ``SemanticType`` values."""

    def __init__(self, user_defined_type: str = "USER-DEFINED"):
        self.user_defined_type = user_defined_type

    def map_type(self, native_type: Optional[str], enum_values: Optional[Sequence[str]] = None) -> SemanticType:
        """Map a native column type.

        Args:
            native_type: Type string as reported by the engine, e.g. ``int(11) unsigned``
            enum_values: Enum labels when the type is a user-defined enum

        Returns:
            The semantic type; unmatched types come back as a literal passthrough
        """
        native_type = native_type or ""

        if native_type == self.user_defined_type and enum_values is not None:
            return SemanticType(ENUM, values=tuple(str(v) for v in enum_values))

        lowered = native_type.lower()
        for predicate, build in TYPE_RULES:
            if predicate(lowered):
                return build(native_type, lowered)

        logger.debug("No semantic type for native type %r, passing it through", native_type)
        return SemanticType(native_type, literal=True)


_default_mapper = TypeMapper()


def map_type(native_type: Optional[str], enum_values: Optional[Sequence[str]] = None) -> SemanticType:
    """Map a native type using the default user-defined type marker."""
    return _default_mapper.map_type(native_type, enum_values)
