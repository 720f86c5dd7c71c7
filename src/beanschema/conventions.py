"""
Accessor conventions: classify a method as getter, setter or neither.

A convention is a pure function of a :class:`~beanschema.scanner.MethodSignature`
returning ``(field_name, AccessorKind)`` or ``None``. The resolvers, binder and
creator only see that result, so a different naming scheme can be plugged in
without touching binding logic.

Architecture:
    ::

        AccessorConvention (protocol)
        ├── BeanConvention        getX() / isX() -> bool / setX(v)   → "x"
        ├── SnakeCaseConvention   get_x() / is_x() -> bool / set_x(v) → "x"
        └── AnnotatedConvention   @schema_field_name / @schema_ignore,
                                  then delegates to a base convention

Examples:
    >>> class Person:
    ...     def getName(self) -> str: ...
    ...     def isActive(self) -> bool: ...
    ...     def setName(self, name: str) -> None: ...
    >>> [BeanConvention().classify(s) for s in scan_methods(Person)]
    [('name', <AccessorKind.GETTER: 'getter'>), ('active', ...), ('name', <AccessorKind.SETTER: 'setter'>)]

Guardrails:
    ❌ DON'T: Inspect naming patterns inside the binder or creator
    ✅ DO: Add a convention and pass it in

Tags:
    convention, naming, accessor, strategy, beanschema

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Protocol, TypeVar, runtime_checkable

from beanschema.errors import InvalidConfigError
from beanschema.scanner import MethodSignature

F = TypeVar("F", bound=Callable)

SCHEMA_FIELD_NAME_ATTR = "__schema_field_name__"
SCHEMA_IGNORE_ATTR = "__schema_ignore__"


class AccessorKind(str, Enum):
    """Role of an accessor method."""

    GETTER = "getter"
    SETTER = "setter"


@runtime_checkable
class AccessorConvention(Protocol):
    """Classifies a method signature as an accessor."""

    def classify(self, signature: MethodSignature) -> tuple[str, AccessorKind] | None:
        ...


def lower_first(value: str) -> str:
    return value[:1].lower() + value[1:]


class _PrefixConvention:
    get_prefix: str
    is_prefix: str
    set_prefix: str

    def field_name(self, suffix: str) -> str:
        return suffix

    def classify(self, signature: MethodSignature) -> tuple[str, AccessorKind] | None:
        if signature.variadic:
            return None
        if signature.arity == 0:
            suffix = self._getter_suffix(signature)
            kind = AccessorKind.GETTER
        elif signature.arity == 1:
            suffix = self._setter_suffix(signature)
            kind = AccessorKind.SETTER
        else:
            return None
        if not suffix or suffix.startswith("_"):
            return None
        return self.field_name(suffix), kind

    def _getter_suffix(self, signature: MethodSignature) -> str | None:
        name = signature.name
        if name.startswith(self.get_prefix) and not signature.returns_void:
            return name[len(self.get_prefix):]
        # unresolved hints stay candidates so the resolver can report them
        if name.startswith(self.is_prefix) and (signature.returns_bool or not signature.resolved):
            return name[len(self.is_prefix):]
        return None

    def _setter_suffix(self, signature: MethodSignature) -> str | None:
        name = signature.name
        if not name.startswith(self.set_prefix):
            return None
        if (
            signature.returns_void
            or not signature.has_return_annotation
            or signature.returns_declaring_type
            or not signature.resolved
        ):
            return name[len(self.set_prefix):]
        return None


@dataclass(frozen=True)
class BeanConvention(_PrefixConvention):
    """JavaBeans-style ``getX``/``isX``/``setX`` accessors; field name is ``lowerFirst(X)``."""

    get_prefix: str = "get"
    is_prefix: str = "is"
    set_prefix: str = "set"

    def field_name(self, suffix: str) -> str:
        return lower_first(suffix)


@dataclass(frozen=True)
class SnakeCaseConvention(_PrefixConvention):
    """``get_x``/``is_x``/``set_x`` accessors; field name is ``x``."""

    get_prefix: str = "get_"
    is_prefix: str = "is_"
    set_prefix: str = "set_"


@dataclass(frozen=True)
class AnnotatedConvention:
    """Honors ``@schema_field_name`` and ``@schema_ignore`` on top of a base convention."""

    base: AccessorConvention = field(default_factory=BeanConvention)

    def classify(self, signature: MethodSignature) -> tuple[str, AccessorKind] | None:
        function = signature.function
        if getattr(function, SCHEMA_IGNORE_ATTR, False):
            return None
        classified = self.base.classify(signature)
        if classified is None:
            return None
        name, kind = classified
        return getattr(function, SCHEMA_FIELD_NAME_ATTR, None) or name, kind


def schema_field_name(name: str) -> Callable[[F], F]:
    """Declare the schema field name of an accessor explicitly."""
    if not name:
        raise ValueError("schema_field_name requires a non-empty name")

    def decorator(function: F) -> F:
        setattr(function, SCHEMA_FIELD_NAME_ATTR, name)
        return function

    return decorator


def schema_ignore(function: F) -> F:
    """Exclude an accessor from schema derivation and binding."""
    setattr(function, SCHEMA_IGNORE_ATTR, True)
    return function


_CONVENTIONS: dict[str, Callable[[], AccessorConvention]] = {
    "bean": BeanConvention,
    "snake": SnakeCaseConvention,
    "annotated": AnnotatedConvention,
}


def get_convention(name: str) -> AccessorConvention:
    """Build a convention by its configured name."""
    try:
        factory = _CONVENTIONS[name]
    except KeyError:
        available = ", ".join(sorted(_CONVENTIONS))
        raise InvalidConfigError(
            f"Unknown naming convention '{name}'. Available: {available}",
            key="naming_convention",
            value=name,
        ) from None
    return factory()


__all__ = [
    "AccessorKind",
    "AccessorConvention",
    "BeanConvention",
    "SnakeCaseConvention",
    "AnnotatedConvention",
    "schema_field_name",
    "schema_ignore",
    "get_convention",
    "lower_first",
]
