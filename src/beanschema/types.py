"""
Schema type system: type names, field types, fields and schemas.

Architecture:
    ::

        Schema
        └── fields: tuple[Field, ...]        (canonical order, fixed at derivation)
              └── Field(name, type)
                    └── FieldType
                          ├── scalar     BOOLEAN, BYTE..INT64, FLOAT, DOUBLE,
                          │              DECIMAL, STRING, BYTES, DATETIME
                          ├── ARRAY      element_type, collection_type
                          ├── MAP        key_type, value_type
                          └── ROW        row_schema, row_class

    The classification table (``SCALAR_TYPES``) maps Python annotations onto
    type names. ``bool``, ``int`` and ``float`` are primitive scalars and are
    non-nullable unless wrapped in ``Optional``; every other type is a
    reference type and nullable.

Examples:
    Sized integers are expressed with ``Annotated`` markers:

    >>> class Account:
    ...     def getId(self) -> Int32: ...
    >>> FieldType.of(TypeName.INT32)
    FieldType(type_name=<TypeName.INT32: 'INT32'>, nullable=False, ...)

Tags:
    schema, field-type, type-system, beanschema

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Iterator


class TypeName(str, Enum):
    """Semantic type of a schema field."""

    BYTE = "BYTE"
    INT16 = "INT16"
    INT32 = "INT32"
    INT64 = "INT64"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    BYTES = "BYTES"
    DATETIME = "DATETIME"
    ARRAY = "ARRAY"
    MAP = "MAP"
    ROW = "ROW"

    @property
    def is_primitive(self) -> bool:
        return self in PRIMITIVE_TYPE_NAMES

    @property
    def is_integral(self) -> bool:
        return self in INTEGER_RANGES

    @property
    def is_composite(self) -> bool:
        return self in (TypeName.ARRAY, TypeName.MAP, TypeName.ROW)


PRIMITIVE_TYPE_NAMES = frozenset(
    {
        TypeName.BOOLEAN,
        TypeName.BYTE,
        TypeName.INT16,
        TypeName.INT32,
        TypeName.INT64,
        TypeName.FLOAT,
        TypeName.DOUBLE,
    }
)

INTEGER_RANGES: dict[TypeName, tuple[int, int]] = {
    TypeName.BYTE: (-(2**7), 2**7 - 1),
    TypeName.INT16: (-(2**15), 2**15 - 1),
    TypeName.INT32: (-(2**31), 2**31 - 1),
    TypeName.INT64: (-(2**63), 2**63 - 1),
}

# Sized scalar markers for annotations
Int8 = Annotated[int, TypeName.BYTE]
Int16 = Annotated[int, TypeName.INT16]
Int32 = Annotated[int, TypeName.INT32]
Int64 = Annotated[int, TypeName.INT64]
Float32 = Annotated[float, TypeName.FLOAT]

SCALAR_TYPES: dict[type, TypeName] = {
    bool: TypeName.BOOLEAN,
    int: TypeName.INT64,
    float: TypeName.DOUBLE,
    str: TypeName.STRING,
    bytes: TypeName.BYTES,
    bytearray: TypeName.BYTES,
    Decimal: TypeName.DECIMAL,
    datetime: TypeName.DATETIME,
}


@dataclass(frozen=True)
class FieldType:
    """Type of a schema field, possibly composite."""

    type_name: TypeName
    nullable: bool = False
    element_type: FieldType | None = None
    collection_type: type | None = None
    key_type: FieldType | None = None
    value_type: FieldType | None = None
    row_schema: Schema | None = None
    row_class: type | None = None

    @classmethod
    def of(cls, type_name: TypeName, nullable: bool | None = None) -> FieldType:
        """Scalar field type; nullability defaults to "not primitive"."""
        if type_name.is_composite:
            raise ValueError(f"{type_name.value} is not a scalar type name")
        if nullable is None:
            nullable = not type_name.is_primitive
        return cls(type_name=type_name, nullable=nullable)

    @classmethod
    def array(
        cls,
        element_type: FieldType,
        collection_type: type | None = None,
        nullable: bool = True,
    ) -> FieldType:
        return cls(
            type_name=TypeName.ARRAY,
            nullable=nullable,
            element_type=element_type,
            collection_type=collection_type,
        )

    @classmethod
    def map(cls, key_type: FieldType, value_type: FieldType, nullable: bool = True) -> FieldType:
        return cls(
            type_name=TypeName.MAP,
            nullable=nullable,
            key_type=key_type,
            value_type=value_type,
        )

    @classmethod
    def row(cls, schema: Schema, row_class: type | None = None, nullable: bool = True) -> FieldType:
        return cls(
            type_name=TypeName.ROW,
            nullable=nullable,
            row_schema=schema,
            row_class=row_class,
        )

    def with_nullable(self, nullable: bool) -> FieldType:
        if self.nullable == nullable:
            return self
        return dataclasses.replace(self, nullable=nullable)

    def equivalent(self, other: FieldType) -> bool:
        """Same shape ignoring nullability and container class."""
        if self.type_name != other.type_name:
            return False
        if self.type_name == TypeName.ARRAY:
            return self.element_type.equivalent(other.element_type)
        if self.type_name == TypeName.MAP:
            return self.key_type.equivalent(other.key_type) and self.value_type.equivalent(
                other.value_type
            )
        if self.type_name == TypeName.ROW:
            return self.row_class is other.row_class
        return True

    def describe(self) -> str:
        """Short human-readable form, e.g. ``ARRAY<STRING>``."""
        if self.type_name == TypeName.ARRAY:
            return f"ARRAY<{self.element_type.describe()}>"
        if self.type_name == TypeName.MAP:
            return f"MAP<{self.key_type.describe()}, {self.value_type.describe()}>"
        if self.type_name == TypeName.ROW:
            name = self.row_class.__qualname__ if self.row_class is not None else "?"
            return f"ROW<{name}>"
        return self.type_name.value

    def __str__(self) -> str:
        return self.describe()

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type_name.value, "nullable": self.nullable}
        if self.element_type is not None:
            result["element_type"] = self.element_type.to_dict()
        if self.key_type is not None:
            result["key_type"] = self.key_type.to_dict()
            result["value_type"] = self.value_type.to_dict()
        if self.row_schema is not None:
            result["row_class"] = self.row_class.__qualname__ if self.row_class else None
            result["fields"] = self.row_schema.to_dict()["fields"]
        return result


@dataclass(frozen=True)
class Field:
    """A named, typed schema field."""

    name: str
    type: FieldType

    @property
    def nullable(self) -> bool:
        return self.type.nullable

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, **self.type.to_dict()}


@dataclass(frozen=True)
class Schema:
    """
    Canonical ordered sequence of fields.

    Field names are unique and case-sensitive. The order is fixed when the
    schema is built and is never changed afterwards.
    """

    fields: tuple[Field, ...]
    _index: dict[str, int] = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        fields = tuple(self.fields)
        index: dict[str, int] = {}
        for position, f in enumerate(fields):
            if f.name in index:
                from beanschema.errors import DuplicateFieldError

                raise DuplicateFieldError(f.name)
            index[f.name] = position
        object.__setattr__(self, "fields", fields)
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __getitem__(self, position: int) -> Field:
        return self.fields[position]

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def has_field(self, name: str) -> bool:
        return name in self._index

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"Schema has no field '{name}'") from None

    def field(self, name: str) -> Field:
        return self.fields[self.index_of(name)]

    def to_dict(self) -> dict[str, Any]:
        return {"fields": [f.to_dict() for f in self.fields]}


__all__ = [
    "TypeName",
    "PRIMITIVE_TYPE_NAMES",
    "INTEGER_RANGES",
    "SCALAR_TYPES",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Float32",
    "FieldType",
    "Field",
    "Schema",
]
