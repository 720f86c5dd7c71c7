"""
Schema deriver: fixes the canonical field set and order of a bean class.

Method discovery order is not meaningful, so the deriver collects the getter
descriptors into a name-keyed mapping first and then orders fields by
ascending field name (code-point order). Every later projection (getter
table, setter table, creator) follows this order.

Nested bean types recurse through :func:`derive_nested_schema` with the chain
of classes currently being derived; meeting a class already in that chain
raises :class:`~beanschema.errors.CyclicSchemaError`.

Examples:
    >>> class Account:
    ...     def getName(self) -> str: ...
    ...     def getId(self) -> Int32: ...
    >>> derive_schema(Account).field_names()
    ['id', 'name']

Tags:
    schema, derivation, reflection, beanschema

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from beanschema.conventions import AccessorConvention
from beanschema.errors import CyclicSchemaError, SchemaError
from beanschema.logging import get_logger
from beanschema.resolver import GetterResolver
from beanschema.types import Field, Schema

logger = get_logger(__name__)


def derive_schema(cls: type, convention: AccessorConvention | None = None) -> Schema:
    """Derive the canonical schema of ``cls`` from its getters.

    Raises:
        DuplicateFieldError: two getters resolve to the same field name
        CyclicSchemaError: ``cls`` reaches itself through nested field types
        UnsupportedTypeError: a getter declares a type with no schema mapping
        SchemaError: ``cls`` is not a class or exposes no getters
    """
    return derive_nested_schema(cls, convention, ())


def derive_nested_schema(
    cls: type,
    convention: AccessorConvention | None,
    in_progress: tuple[type, ...],
) -> Schema:
    if not isinstance(cls, type):
        raise SchemaError(f"Cannot derive a schema from non-class {cls!r}")
    if cls in in_progress:
        raise CyclicSchemaError(cls, path=in_progress)

    resolver = GetterResolver(convention)
    descriptors = resolver.resolve(cls, in_progress + (cls,))
    if not descriptors:
        raise SchemaError(f"{cls.__qualname__} exposes no getters").with_context(
            target_class=cls
        )

    schema = Schema(
        tuple(Field(name, descriptors[name].type) for name in sorted(descriptors))
    )
    logger.debug(
        "schema_derived",
        target_class=cls.__qualname__,
        fields=schema.field_names(),
        depth=len(in_progress),
    )
    return schema


__all__ = ["derive_schema", "derive_nested_schema"]
