"""
Field type resolvers: turn classified accessors into field type descriptors.

``GetterResolver`` reads the declared type from a getter's return annotation,
``SetterResolver`` from a setter's single parameter annotation. Both return a
``dict[field_name, FieldTypeDescriptor]``; the dict carries no ordering
meaning, canonical order is applied later by the deriver and binder.

Type mapping (``resolve_field_type``):

    ============================================  ======================
    annotation                                    field type
    ============================================  ======================
    bool / int / float                            BOOLEAN / INT64 / DOUBLE (not null)
    Int8 / Int16 / Int32 / Float32                BYTE / INT16 / INT32 / FLOAT (not null)
    str / bytes / Decimal / datetime              STRING / BYTES / DECIMAL / DATETIME
    list[T], tuple[T, ...], set[T], Sequence[T]   ARRAY<T>
    dict[K, V], Mapping[K, V]                     MAP<K, V>
    Optional[T] / T | None                        T, nullable
    bean class                                    ROW (recursive derivation)
    ============================================  ======================

Tags:
    resolver, type-mapping, reflection, beanschema

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import collections.abc
import inspect
import types
import typing
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin

from beanschema.conventions import AccessorConvention, AccessorKind
from beanschema.errors import DuplicateFieldError, UnsupportedTypeError
from beanschema.scanner import MethodSignature, scan_methods
from beanschema.types import SCALAR_TYPES, FieldType, TypeName

ARRAY_ORIGINS = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: None,
    collections.abc.MutableSequence: list,
    collections.abc.Collection: None,
    collections.abc.Iterable: None,
    collections.abc.Set: None,
    collections.abc.MutableSet: set,
}

MAP_ORIGINS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}

_UNPARAMETERIZED = {list, tuple, set, frozenset, dict} | set(ARRAY_ORIGINS) | MAP_ORIGINS


@dataclass(frozen=True)
class FieldTypeDescriptor:
    """Field name, declared type and the accessor it was derived from."""

    name: str
    type: FieldType
    method: MethodSignature

    @property
    def nullable(self) -> bool:
        return self.type.nullable

    @property
    def method_name(self) -> str:
        return self.method.name


class _FieldTypeResolver:
    kind: AccessorKind

    def __init__(self, convention: AccessorConvention | None = None):
        if convention is None:
            from beanschema.settings import default_convention

            convention = default_convention()
        self.convention = convention

    def accessors(self, cls: type) -> dict[str, MethodSignature]:
        """Classify ``cls``'s methods, keeping those of this resolver's kind."""
        found: dict[str, MethodSignature] = {}
        for signature in scan_methods(cls):
            classified = self.convention.classify(signature)
            if classified is None or classified[1] != self.kind:
                continue
            name = classified[0]
            if name in found:
                raise DuplicateFieldError(
                    name,
                    target_class=cls,
                    methods=(found[name].name, signature.name),
                    accessor_kind=self.kind.value,
                )
            found[name] = signature
        return found

    def describe(
        self,
        cls: type,
        accessors: dict[str, MethodSignature],
        in_progress: tuple[type, ...] = (),
    ) -> dict[str, FieldTypeDescriptor]:
        """Resolve the declared types of already classified accessors."""
        descriptors: dict[str, FieldTypeDescriptor] = {}
        for name, signature in accessors.items():
            if signature.hint_error is not None:
                raise UnsupportedTypeError(
                    f"Cannot resolve annotations of {signature.qualname}: {signature.hint_error}",
                    target_class=cls,
                    field_name=name,
                    method_name=signature.name,
                    cause=signature.hint_error,
                )
            field_type = resolve_field_type(
                self.declared_type(signature),
                self.convention,
                in_progress,
                target_class=cls,
                field_name=name,
                method_name=signature.name,
            )
            descriptors[name] = FieldTypeDescriptor(name, field_type, signature)
        return descriptors

    def resolve(
        self, cls: type, in_progress: tuple[type, ...] = ()
    ) -> dict[str, FieldTypeDescriptor]:
        """Map every accessor of this resolver's kind to a descriptor."""
        return self.describe(cls, self.accessors(cls), in_progress)

    def declared_type(self, signature: MethodSignature) -> Any:
        raise NotImplementedError


class GetterResolver(_FieldTypeResolver):
    """Field types from getter return annotations."""

    kind = AccessorKind.GETTER

    def declared_type(self, signature: MethodSignature) -> Any:
        return signature.return_type


class SetterResolver(_FieldTypeResolver):
    """Field types from setter parameter annotations."""

    kind = AccessorKind.SETTER

    def declared_type(self, signature: MethodSignature) -> Any:
        return signature.param_types[0]


def resolver_for(kind: AccessorKind, convention: AccessorConvention | None = None) -> _FieldTypeResolver:
    if kind == AccessorKind.GETTER:
        return GetterResolver(convention)
    return SetterResolver(convention)


def is_bean_class(cls: Any, convention: AccessorConvention) -> bool:
    """A class is bean-like when it exposes at least one getter."""
    if not isinstance(cls, type) or cls in SCALAR_TYPES or cls.__module__ == "builtins":
        return False
    for signature in scan_methods(cls):
        classified = convention.classify(signature)
        if classified is not None and classified[1] == AccessorKind.GETTER:
            return True
    return False


def resolve_field_type(
    annotation: Any,
    convention: AccessorConvention,
    in_progress: tuple[type, ...] = (),
    *,
    target_class: Any = None,
    field_name: str | None = None,
    method_name: str | None = None,
) -> FieldType:
    """Map a resolved annotation onto a :class:`FieldType`."""

    def unsupported(reason: str) -> UnsupportedTypeError:
        owner = getattr(target_class, "__qualname__", target_class)
        return UnsupportedTypeError(
            f"Field '{field_name}' of {owner}: {reason}",
            target_class=target_class,
            field_name=field_name,
            method_name=method_name,
        )

    def resolve(inner: Any) -> FieldType:
        return resolve_field_type(
            inner,
            convention,
            in_progress,
            target_class=target_class,
            field_name=field_name,
            method_name=method_name,
        )

    if annotation is inspect.Parameter.empty:
        raise unsupported("missing type annotation")

    origin = get_origin(annotation)

    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        present = [arg for arg in args if arg is not type(None)]
        if len(present) != 1 or len(present) == len(args):
            raise unsupported(f"union {annotation!r} is not Optional[T]")
        return resolve(present[0]).with_nullable(True)

    if origin is Annotated:
        base, *metadata = get_args(annotation)
        inner = resolve(base)
        type_names = [m for m in metadata if isinstance(m, TypeName)]
        if not type_names:
            return inner
        type_name = type_names[-1]
        if type_name.is_composite or inner.type_name.is_composite:
            raise unsupported(f"{type_name.value} cannot annotate {annotation!r}")
        return FieldType.of(type_name, nullable=inner.nullable or not type_name.is_primitive)

    if isinstance(annotation, type) and annotation in SCALAR_TYPES:
        return FieldType.of(SCALAR_TYPES[annotation])

    if origin in ARRAY_ORIGINS:
        args = get_args(annotation)
        if origin is tuple:
            if len(args) != 2 or args[1] is not Ellipsis:
                raise unsupported(f"only homogeneous tuple[T, ...] is supported, got {annotation!r}")
            args = args[:1]
        if len(args) != 1:
            raise unsupported(f"collection {annotation!r} needs one element type")
        return FieldType.array(resolve(args[0]), collection_type=ARRAY_ORIGINS[origin])

    if origin in MAP_ORIGINS:
        args = get_args(annotation)
        if len(args) != 2:
            raise unsupported(f"mapping {annotation!r} needs key and value types")
        return FieldType.map(resolve(args[0]), resolve(args[1]))

    if any(annotation is bare for bare in _UNPARAMETERIZED) or annotation is typing.Any:
        raise unsupported(f"{annotation!r} has no element type")

    if is_bean_class(annotation, convention):
        from beanschema.deriver import derive_nested_schema

        schema = derive_nested_schema(annotation, convention, in_progress)
        return FieldType.row(schema, annotation)

    raise unsupported(f"{annotation!r} has no schema representation")


__all__ = [
    "FieldTypeDescriptor",
    "GetterResolver",
    "SetterResolver",
    "resolver_for",
    "resolve_field_type",
    "is_bean_class",
]
