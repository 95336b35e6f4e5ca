"""Tests for native type to semantic type mapping."""

import pytest

from modelgen.database.type_mappers import (
    SemanticType,
    TypeMapper,
    map_type,
    BIGINT,
    BOOLEAN,
    CHAR,
    DATE,
    DECIMAL,
    DOUBLE,
    ENUM,
    FLOAT,
    GEOMETRY,
    INTEGER,
    JSON,
    JSONB,
    REAL,
    TEXT,
    UUID,
)


class TestRulePriority:
    """Test that the first matching rule wins."""

    @pytest.mark.parametrize("native_type,expected", [
        ("boolean", BOOLEAN),
        ("BIT(1)", BOOLEAN),
        ("bit", BOOLEAN),
        ("int", INTEGER),
        ("integer", INTEGER),
        ("smallint", INTEGER),
        ("mediumint(9)", INTEGER),
        ("tinyint(1)", INTEGER),
        ("bigint(20)", BIGINT),
        ("BIGINT", BIGINT),
        ("varchar(255)", TEXT),
        ("CHARACTER VARYING(255)", TEXT),
        ("nvarchar(50)", TEXT),
        ("string", TEXT),
        ("char(10)", CHAR),
        ("CHARACTER(2)", CHAR),
        ("real", REAL),
        ("text", TEXT),
        ("mediumtext", TEXT),
        ("tinytext", TEXT),
        ("ntext", TEXT),
        ("date", DATE),
        ("datetime", DATE),
        ("TIMESTAMP WITH TIME ZONE", DATE),
        ("time", DATE),
        ("float", FLOAT),
        ("float4", FLOAT),
        ("decimal(10,2)", DECIMAL),
        ("double precision", DOUBLE),
        ("NUMERIC(10,2)", DOUBLE),
        ("uuid", UUID),
        ("uniqueidentifier", UUID),
        ("json", JSON),
        ("jsonb", JSONB),
        ("geometry", GEOMETRY),
    ])
    def test_maps_to_expected_type(self, native_type, expected):
        """Test each rule on an input it should own."""
        result = map_type(native_type)
        assert result.name == expected
        assert result.literal is False

    def test_bigint_is_not_integer(self):
        """Test bigint is not caught by the integer family."""
        assert map_type("bigint(20)") == SemanticType(BIGINT)

    def test_float8_matches_float_before_double(self):
        """Test float8 is owned by the earlier float rule."""
        assert map_type("float8").name == FLOAT

    def test_varying_wins_over_char_prefix(self):
        """Test character varying maps to TEXT, not CHAR."""
        assert map_type("character varying").name == TEXT

    def test_tinytext_is_not_integer(self):
        """Test tinytext is not mistaken for tinyint."""
        assert map_type("tinytext").name == TEXT


class TestModifiers:
    """Test length, unsigned and zerofill handling."""

    def test_integer_length_unsigned_zerofill(self):
        """Test MySQL integer modifiers are all carried."""
        result = map_type("int(11) unsigned zerofill")
        assert result == SemanticType(INTEGER, length="(11)", unsigned=True, zerofill=True)
        assert result.expression() == "INTEGER(11).UNSIGNED.ZEROFILL"

    def test_uppercase_unsigned(self):
        """Test modifiers are detected case-insensitively."""
        result = map_type("INT(10) UNSIGNED")
        assert result.unsigned is True
        assert result.zerofill is False
        assert result.expression() == "INTEGER(10).UNSIGNED"

    def test_varchar_length(self):
        """Test varchar keeps its length."""
        assert map_type("VARCHAR(255)").expression() == "TEXT(255)"

    def test_char_length(self):
        """Test char keeps its length."""
        assert map_type("char(3)").expression() == "CHAR(3)"

    def test_decimal_drops_precision(self):
        """Test families without length support drop the suffix."""
        assert map_type("decimal(10,2)").expression() == "DECIMAL"

    def test_bigint_drops_length(self):
        """Test bigint does not carry a length."""
        assert map_type("bigint(20) unsigned").expression() == "BIGINT"


class TestEnums:
    """Test user-defined enum types."""

    def test_user_defined_with_values(self):
        """Test an enum is built from its labels."""
        result = map_type("USER-DEFINED", ["new", "paid"])
        assert result.name == ENUM
        assert result.values == ("new", "paid")
        assert result.is_enum
        assert result.expression() == 'ENUM("new","paid")'

    def test_user_defined_without_values(self):
        """Test a user-defined type without labels passes through."""
        result = map_type("USER-DEFINED")
        assert result.literal is True
        assert result.name == "USER-DEFINED"

    def test_enum_values_ignored_for_other_types(self):
        """Test labels only matter for the user-defined marker."""
        assert map_type("integer", ["a"]).name == INTEGER

    def test_custom_marker(self):
        """Test the marker is configurable per dialect."""
        mapper = TypeMapper(user_defined_type="ENUM")
        assert mapper.map_type("ENUM", ["x"]).expression() == 'ENUM("x")'


class TestPassthrough:
    """Test unmatched native types."""

    def test_unknown_type_passes_through(self):
        """Test an unknown type is returned as a literal, not an error."""
        result = map_type("xmltype")
        assert result == SemanticType("xmltype", literal=True)
        assert result.expression() == "xmltype"

    def test_passthrough_keeps_original_case(self):
        """Test the literal keeps the original spelling."""
        assert map_type("XMLTYPE").name == "XMLTYPE"

    def test_empty_type(self):
        """Test a missing type does not raise."""
        assert map_type(None).literal is True

    def test_mapping_is_deterministic(self):
        """Test repeated mapping gives equal results."""
        assert map_type("int(11) unsigned") == map_type("int(11) unsigned")
