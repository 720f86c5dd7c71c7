"""
Bean schema provider: one object bundling derivation, binding and creation.

``BeanSchemaProvider`` is what a row-oriented framework holds on to: it
derives schemas, hands out getter and setter tables and creators, and builds
whole-object row functions that also convert nested beans.

Architecture:
    ::

        BeanSchemaProvider(convention)
        ├── schema_for(cls)                          → Schema
        ├── field_value_getters(cls, schema)         → AccessorTable (getters)
        ├── field_value_type_informations(cls, ...)  → [FieldTypeDescriptor]
        ├── field_value_setters(cls, schema)         → AccessorTable (setters)
        ├── schema_type_creator(cls, schema)         → InstanceCreator
        ├── to_row_function(cls)                     → instance → [values]
        └── from_row_function(cls)                   → [values] → instance

    Row functions recurse into ROW fields and into ARRAY/MAP fields holding
    ROW values: a nested bean becomes a nested value list and back.

Examples:
    >>> provider = BeanSchemaProvider()
    >>> to_row = provider.to_row_function(Order)
    >>> to_row(order)  # byLabel, count, customer, shipments
    [{'home': ['C St', '3']}, 2, [7, 'x'], [['A St', '1'], ['B St', '2']]]
    >>> provider.from_row_function(Order)(to_row(order)) == order
    True

Tags:
    provider, schema, row-conversion, beanschema

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from typing import Any, Callable

from beanschema.binder import AccessorTable, bind_getters, bind_setters
from beanschema.conventions import AccessorConvention
from beanschema.creator import InstanceCreator, make_creator
from beanschema.deriver import derive_schema
from beanschema.resolver import FieldTypeDescriptor
from beanschema.types import FieldType, Schema, TypeName

Converter = Callable[[Any], Any]


class BeanSchemaProvider:
    """Schemas, accessor tables and creators for bean classes under one convention."""

    def __init__(self, convention: AccessorConvention | None = None):
        if convention is None:
            from beanschema.settings import default_convention

            convention = default_convention()
        self.convention = convention

    def schema_for(self, cls: type) -> Schema:
        return derive_schema(cls, self.convention)

    def field_value_getters(self, cls: type, schema: Schema) -> AccessorTable:
        return bind_getters(cls, schema, self.convention)

    def field_value_type_informations(
        self, cls: type, schema: Schema
    ) -> list[FieldTypeDescriptor]:
        """Getter descriptors in schema order."""
        return [accessor.descriptor for accessor in self.field_value_getters(cls, schema)]

    def field_value_setters(self, cls: type, schema: Schema) -> AccessorTable:
        return bind_setters(cls, schema, self.convention)

    def schema_type_creator(self, cls: type, schema: Schema) -> InstanceCreator:
        return make_creator(cls, self.field_value_setters(cls, schema))

    def to_row_function(self, cls: type) -> Callable[[Any], list[Any]]:
        """Instance → schema-ordered values, nested beans as nested lists."""
        schema = self.schema_for(cls)
        getters = self.field_value_getters(cls, schema)
        converters = [self._to_row_converter(field.type) for field in schema]

        def to_row(instance: Any) -> list[Any]:
            return [
                value if convert is None or value is None else convert(value)
                for value, convert in zip(getters.extract(instance), converters)
            ]

        return to_row

    def from_row_function(self, cls: type) -> Callable[[list[Any]], Any]:
        """Schema-ordered values → new instance; inverse of :meth:`to_row_function`."""
        schema = self.schema_for(cls)
        creator = self.schema_type_creator(cls, schema)
        converters = [self._from_row_converter(field.type) for field in schema]

        def from_row(values: list[Any]) -> Any:
            if len(values) == len(converters):
                values = [
                    value if convert is None or value is None else convert(value)
                    for value, convert in zip(values, converters)
                ]
            return creator(values)

        return from_row

    def _to_row_converter(self, field_type: FieldType) -> Converter | None:
        if field_type.type_name == TypeName.ROW:
            return self.to_row_function(field_type.row_class)
        return _container_converter(field_type, self._to_row_converter)

    def _from_row_converter(self, field_type: FieldType) -> Converter | None:
        if field_type.type_name == TypeName.ROW:
            from_row = self.from_row_function(field_type.row_class)
            row_class = field_type.row_class
            return lambda value: value if isinstance(value, row_class) else from_row(value)
        return _container_converter(field_type, self._from_row_converter)


def _container_converter(
    field_type: FieldType, nested: Callable[[FieldType], Converter | None]
) -> Converter | None:
    """Element-wise converter for ARRAY/MAP types holding rows, else None."""
    if field_type.type_name == TypeName.ARRAY:
        convert = nested(field_type.element_type)
        if convert is None:
            return None
        return lambda values: [None if item is None else convert(item) for item in values]
    if field_type.type_name == TypeName.MAP:
        convert = nested(field_type.value_type)
        if convert is None:
            return None
        return lambda mapping: {
            key: None if item is None else convert(item) for key, item in mapping.items()
        }
    return None


__all__ = ["BeanSchemaProvider"]
