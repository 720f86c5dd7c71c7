"""
Tests for beanschema.coercion.

Covers:
- Scalar conversions and range checks
- Collection and map element coercion
- Nested row values
"""

from datetime import datetime
from decimal import Decimal
from fractions import Fraction

import pytest

from beanschema.coercion import coerce_value
from beanschema.deriver import derive_schema
from beanschema.errors import TypeMismatchError
from beanschema.types import FieldType, TypeName
from tests._support.beans import Account, Address, make_address

INT32 = FieldType.of(TypeName.INT32)
DOUBLE = FieldType.of(TypeName.DOUBLE)
FLOAT = FieldType.of(TypeName.FLOAT)
STRING = FieldType.of(TypeName.STRING)


def _coerce(value, field_type):
    return coerce_value(value, field_type, field_name="f", target_class=Account)


class TestScalars:
    """Test lossless scalar conversions."""

    def test_int_passthrough(self):
        assert _coerce(5, INT32) == 5

    @pytest.mark.parametrize(
        "type_name,value",
        [
            (TypeName.BYTE, 128),
            (TypeName.BYTE, -129),
            (TypeName.INT16, 2**15),
            (TypeName.INT32, -(2**31) - 1),
            (TypeName.INT64, 2**63),
        ],
    )
    def test_integer_ranges(self, type_name, value):
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce(value, FieldType.of(type_name))
        assert exc_info.value.actual_type == f"int out of {type_name.value} range"

    def test_range_bounds_accepted(self):
        assert _coerce(127, FieldType.of(TypeName.BYTE)) == 127
        assert _coerce(-(2**31), INT32) == -(2**31)

    def test_int_to_double(self):
        result = _coerce(3, DOUBLE)
        assert result == 3.0
        assert isinstance(result, float)

    def test_float_to_int_rejected(self):
        with pytest.raises(TypeMismatchError):
            _coerce(3.0, INT32)

    def test_float32_range(self):
        assert _coerce(1.5, FLOAT) == 1.5
        assert _coerce(float("inf"), FLOAT) == float("inf")
        with pytest.raises(TypeMismatchError):
            _coerce(1e39, FLOAT)

    @pytest.mark.parametrize("field_type", [DOUBLE, FLOAT], ids=["double", "float"])
    def test_huge_int_out_of_range(self, field_type):
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce(10**400, field_type)
        assert exc_info.value.actual_type == f"int out of {field_type.type_name.value} range"
        assert exc_info.value.field_name == "f"

    def test_inexact_int_rejected(self):
        assert _coerce(2**53, DOUBLE) == float(2**53)
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce(2**53 + 1, DOUBLE)
        assert exc_info.value.actual_type == "int not exactly representable as float"

    def test_fraction_must_be_exact(self):
        assert _coerce(Fraction(1, 2), DOUBLE) == 0.5
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce(Fraction(1, 3), DOUBLE)
        assert exc_info.value.actual_type == "Fraction not exactly representable as float"

    def test_bool_not_numeric(self):
        with pytest.raises(TypeMismatchError):
            _coerce(True, DOUBLE)
        with pytest.raises(TypeMismatchError):
            _coerce(1, FieldType.of(TypeName.BOOLEAN))

    def test_decimal(self):
        decimal_type = FieldType.of(TypeName.DECIMAL)
        assert _coerce(Decimal("1.5"), decimal_type) == Decimal("1.5")
        assert _coerce(2, decimal_type) == Decimal(2)
        with pytest.raises(TypeMismatchError):
            _coerce(1.5, decimal_type)

    def test_bytes(self):
        bytes_type = FieldType.of(TypeName.BYTES)
        result = _coerce(bytearray(b"ab"), bytes_type)
        assert result == b"ab"
        assert type(result) is bytes
        assert _coerce(memoryview(b"cd"), bytes_type) == b"cd"

    def test_string_is_not_stringified(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce(5, STRING)
        assert exc_info.value.expected_type == "STRING"
        assert exc_info.value.actual_type == "int"

    def test_datetime(self):
        moment = datetime(2024, 1, 2)
        assert _coerce(moment, FieldType.of(TypeName.DATETIME)) is moment
        with pytest.raises(TypeMismatchError):
            _coerce("2024-01-02", FieldType.of(TypeName.DATETIME))


class TestNulls:
    def test_nullable_accepts_none(self):
        assert _coerce(None, STRING) is None
        assert _coerce(None, INT32.with_nullable(True)) is None

    def test_non_nullable_rejects_none(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce(None, INT32)
        assert exc_info.value.actual_type == "None"


class TestCollections:
    """Test ARRAY and MAP coercion."""

    def test_list_from_tuple(self):
        list_type = FieldType.array(INT32, collection_type=list)
        assert _coerce((1, 2), list_type) == [1, 2]

    def test_tuple_container(self):
        tuple_type = FieldType.array(INT32, collection_type=tuple)
        assert _coerce([1, 2], tuple_type) == (1, 2)

    def test_abstract_container_keeps_concrete_type(self):
        sequence_type = FieldType.array(INT32)
        assert _coerce((1, 2), sequence_type) == (1, 2)
        assert _coerce(range(2), sequence_type) == [0, 1]

    def test_element_error_names_position(self):
        list_type = FieldType.array(INT32, collection_type=list)
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce([1, "two"], list_type)
        assert exc_info.value.field_name == "f[1]"

    def test_string_is_not_an_array(self):
        with pytest.raises(TypeMismatchError):
            _coerce("ab", FieldType.array(STRING))

    def test_map(self):
        map_type = FieldType.map(STRING, DOUBLE)
        assert _coerce({"a": 1}, map_type) == {"a": 1.0}

    def test_map_value_error_names_key(self):
        map_type = FieldType.map(STRING, INT32)
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce({"a": "x"}, map_type)
        assert exc_info.value.field_name == "f['a']"

    def test_map_key_error(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce({1: 1}, FieldType.map(STRING, INT32))
        assert exc_info.value.field_name == "f.key"

    def test_sequence_is_not_a_map(self):
        with pytest.raises(TypeMismatchError):
            _coerce([("a", 1)], FieldType.map(STRING, INT32))


class TestRows:
    def test_instance_of_row_class(self):
        row_type = FieldType.row(derive_schema(Address), Address)
        address = make_address()
        assert _coerce(address, row_type) is address

    def test_other_class_rejected(self):
        row_type = FieldType.row(derive_schema(Address), Address)
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce(Account(), row_type)
        assert exc_info.value.expected_type == "ROW<Address>"
