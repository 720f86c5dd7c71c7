"""
Accessor binder: projects getters or setters onto a derived schema.

Architecture:
    ::

        derive_schema(cls) ──► Schema [id, name]
                                   │
        GetterResolver ─► {name: d, id: d} ──┐
                                             ├─► project by schema order
        SetterResolver ─► {id: d, name: d} ──┘
                                   │
                 AccessorTable [id, name]  (getters)
                 AccessorTable [id, name]  (setters)

    Both tables are built by looking each schema field up by name, so they
    always have the schema's length and order regardless of how the
    resolvers discovered the methods. Only accessors named by the schema
    have their types resolved, so an extra accessor with an unsupported
    type does not prevent binding. A field without an accessor raises
    :class:`~beanschema.errors.MissingAccessorError`.

Examples:
    >>> schema = derive_schema(Account)
    >>> getters = bind_getters(Account, schema)
    >>> getters.extract(account)
    [7, 'x']

Tags:
    binder, accessor-table, reflection, beanschema

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Sequence

from beanschema.conventions import AccessorConvention, AccessorKind
from beanschema.errors import BindingError, MissingAccessorError
from beanschema.logging import get_logger
from beanschema.resolver import FieldTypeDescriptor, resolver_for
from beanschema.types import FieldType, Schema

logger = get_logger(__name__)


@dataclass(frozen=True)
class Accessor:
    """One bound getter or setter, named after its schema field."""

    name: str
    descriptor: FieldTypeDescriptor
    function: Callable[..., Any]

    @property
    def type(self) -> FieldType:
        return self.descriptor.type

    @property
    def method_name(self) -> str:
        return self.descriptor.method_name


@dataclass(frozen=True)
class AccessorTable:
    """Accessors index-aligned with ``Schema.fields``."""

    kind: AccessorKind
    target_class: type
    entries: tuple[Accessor, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Accessor]:
        return iter(self.entries)

    def __getitem__(self, position: int) -> Accessor:
        return self.entries[position]

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    def extract(self, instance: Any) -> list[Any]:
        """Decompose ``instance`` into a schema-ordered value list."""
        self._require(AccessorKind.GETTER)
        return [entry.function(instance) for entry in self.entries]

    def apply(self, instance: Any, values: Sequence[Any]) -> None:
        """Call every setter of ``instance`` with the matching value, no coercion."""
        self._require(AccessorKind.SETTER)
        for entry, value in zip(self.entries, values, strict=True):
            entry.function(instance, value)

    def _require(self, kind: AccessorKind) -> None:
        if self.kind != kind:
            raise BindingError(
                f"{self.kind.value} table of {self.target_class.__qualname__} "
                f"cannot be used as a {kind.value} table"
            ).with_context(target_class=self.target_class, accessor_kind=self.kind.value)


def _getter_function(method_name: str) -> Callable[[Any], Any]:
    return operator.methodcaller(method_name)


def _setter_function(method_name: str) -> Callable[[Any, Any], Any]:
    def apply(instance: Any, value: Any) -> Any:
        return getattr(instance, method_name)(value)

    apply.__name__ = method_name
    return apply


def bind_getters(
    cls: type, schema: Schema, convention: AccessorConvention | None = None
) -> AccessorTable:
    """Getter table of ``cls`` in ``schema`` order."""
    return _bind(cls, schema, AccessorKind.GETTER, convention)


def bind_setters(
    cls: type, schema: Schema, convention: AccessorConvention | None = None
) -> AccessorTable:
    """Setter table of ``cls`` in ``schema`` order."""
    return _bind(cls, schema, AccessorKind.SETTER, convention)


def _bind(
    cls: type,
    schema: Schema,
    kind: AccessorKind,
    convention: AccessorConvention | None,
) -> AccessorTable:
    resolver = resolver_for(kind, convention)
    accessors = resolver.accessors(cls)
    # accessors outside the schema are never type-resolved
    descriptors = resolver.describe(
        cls, {name: method for name, method in accessors.items() if schema.has_field(name)}
    )
    make_function = _getter_function if kind == AccessorKind.GETTER else _setter_function

    entries = []
    for field in schema:
        descriptor = descriptors.get(field.name)
        if descriptor is None:
            raise MissingAccessorError(field.name, kind.value, target_class=cls)
        if not descriptor.type.equivalent(field.type):
            logger.warning(
                "setter_type_differs" if kind == AccessorKind.SETTER else "getter_type_differs",
                target_class=cls.__qualname__,
                field=field.name,
                schema_type=field.type.describe(),
                accessor_type=descriptor.type.describe(),
            )
        entries.append(Accessor(field.name, descriptor, make_function(descriptor.method_name)))

    unbound = sorted(set(accessors) - set(schema.field_names()))
    logger.debug(
        "accessors_bound",
        target_class=cls.__qualname__,
        kind=kind.value,
        fields=len(entries),
        unbound=unbound,
    )
    return AccessorTable(kind=kind, target_class=cls, entries=tuple(entries))


__all__ = ["Accessor", "AccessorTable", "bind_getters", "bind_setters"]
