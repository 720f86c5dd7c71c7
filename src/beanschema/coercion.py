"""Value coercion from field values to a setter's declared field type."""

from __future__ import annotations

import math
import numbers
from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any

from beanschema.errors import TypeMismatchError
from beanschema.types import INTEGER_RANGES, FieldType, TypeName

FLOAT32_MAX = 3.4028234663852886e38

_CONCRETE_COLLECTIONS = (list, tuple, set, frozenset)


def coerce_value(
    value: Any,
    field_type: FieldType,
    *,
    field_name: str,
    target_class: Any = None,
) -> Any:
    """Convert ``value`` to ``field_type`` or raise :class:`TypeMismatchError`.

    Only lossless conversions are made: an ``int`` becomes a ``float`` for a
    DOUBLE field when it converts exactly, a ``bytearray`` becomes ``bytes``,
    a ``tuple`` becomes the declared ``list``. A ``bool`` is never accepted as
    a number.
    """

    def mismatch(actual: str | None = None) -> TypeMismatchError:
        return TypeMismatchError(
            field_name,
            field_type.describe(),
            actual or type(value).__qualname__,
            target_class=target_class,
        )

    if value is None:
        if field_type.nullable:
            return None
        raise mismatch("None")

    type_name = field_type.type_name

    if type_name == TypeName.BOOLEAN:
        if isinstance(value, bool):
            return value
        raise mismatch()

    if type_name.is_integral:
        if not isinstance(value, numbers.Integral) or isinstance(value, bool):
            raise mismatch()
        low, high = INTEGER_RANGES[type_name]
        value = int(value)
        if not low <= value <= high:
            raise mismatch(f"int out of {type_name.value} range")
        return value

    if type_name in (TypeName.FLOAT, TypeName.DOUBLE):
        if not isinstance(value, numbers.Real) or isinstance(value, bool):
            raise mismatch()
        if isinstance(value, float):
            converted = value
        else:
            try:
                converted = float(value)
            except OverflowError:
                raise mismatch(f"{type(value).__qualname__} out of {type_name.value} range") from None
            # int and Fraction compare exactly against float
            if converted != value:
                raise mismatch(f"{type(value).__qualname__} not exactly representable as float")
        if type_name == TypeName.FLOAT and math.isfinite(converted) and abs(converted) > FLOAT32_MAX:
            raise mismatch(f"{type(value).__qualname__} out of FLOAT range")
        return converted

    if type_name == TypeName.DECIMAL:
        if isinstance(value, Decimal):
            return value
        if isinstance(value, numbers.Integral) and not isinstance(value, bool):
            return Decimal(int(value))
        raise mismatch()

    if type_name == TypeName.STRING:
        if isinstance(value, str):
            return value
        raise mismatch()

    if type_name == TypeName.BYTES:
        if isinstance(value, bytes):
            return value
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        raise mismatch()

    if type_name == TypeName.DATETIME:
        if isinstance(value, datetime):
            return value
        raise mismatch()

    if type_name == TypeName.ARRAY:
        if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(value, Iterable):
            raise mismatch()
        items = [
            coerce_value(
                item,
                field_type.element_type,
                field_name=f"{field_name}[{position}]",
                target_class=target_class,
            )
            for position, item in enumerate(value)
        ]
        container = field_type.collection_type
        if container is None:
            container = type(value) if type(value) in _CONCRETE_COLLECTIONS else list
        return container(items)

    if type_name == TypeName.MAP:
        if not isinstance(value, Mapping):
            raise mismatch()
        return {
            coerce_value(
                key, field_type.key_type, field_name=f"{field_name}.key", target_class=target_class
            ): coerce_value(
                item,
                field_type.value_type,
                field_name=f"{field_name}[{key!r}]",
                target_class=target_class,
            )
            for key, item in value.items()
        }

    if type_name == TypeName.ROW:
        if field_type.row_class is None or isinstance(value, field_type.row_class):
            return value
        raise mismatch()

    raise mismatch()


__all__ = ["coerce_value"]
