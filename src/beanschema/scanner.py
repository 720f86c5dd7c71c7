"""
Type scanner: enumerates the public, non-static methods of a class.

The scanner walks ``cls.__mro__`` from ``object`` down to ``cls`` so that an
override in a subclass replaces the inherited definition. Names starting with
an underscore are never public; ``staticmethod``/``classmethod`` attributes,
properties and plain data are skipped.

Each surviving method is described by a :class:`MethodSignature` whose
annotations are resolved with ``typing.get_type_hints``. Resolution failures
(for example a forward reference to a name that does not exist) are recorded
on the signature instead of raised here; the resolver raises them only for
methods that turn out to be accessors.

Tags:
    reflection, introspection, scanner, beanschema

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import inspect
import types
import typing
from dataclasses import dataclass
from typing import Any, Callable

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_EMPTY = inspect.Parameter.empty


@dataclass(frozen=True)
class MethodSignature:
    """Reflection view of one public method as seen from ``owner``."""

    name: str
    owner: type
    declaring_class: type
    function: Callable[..., Any]
    param_types: tuple[Any, ...]
    return_type: Any
    variadic: bool = False
    hint_error: Exception | None = None

    @property
    def arity(self) -> int:
        return len(self.param_types)

    @property
    def resolved(self) -> bool:
        return self.hint_error is None

    @property
    def has_return_annotation(self) -> bool:
        return self.return_type is not _EMPTY

    @property
    def returns_void(self) -> bool:
        return self.return_type is None or self.return_type is type(None)

    @property
    def returns_bool(self) -> bool:
        """True for ``bool`` and ``Optional[bool]`` return types."""
        if typing.get_origin(self.return_type) in (typing.Union, types.UnionType):
            return set(typing.get_args(self.return_type)) == {bool, type(None)}
        return self.return_type is bool

    @property
    def returns_declaring_type(self) -> bool:
        """True for fluent setters (``-> Self`` or ``-> "Person"``)."""
        return_type = self.return_type
        if return_type is typing.Self:
            return True
        if not isinstance(return_type, type) or return_type is object:
            return False
        try:
            return issubclass(self.owner, return_type) or issubclass(
                self.declaring_class, return_type
            )
        except TypeError:
            return False

    @property
    def qualname(self) -> str:
        return f"{self.declaring_class.__qualname__}.{self.name}"


def scan_methods(cls: type) -> list[MethodSignature]:
    """Return the public, non-static methods of ``cls``, overrides deduplicated."""
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {type(cls).__qualname__}")

    members: dict[str, tuple[type, Any]] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, attr in vars(klass).items():
            if name.startswith("_"):
                continue
            members[name] = (klass, attr)

    signatures = []
    for name, (klass, attr) in members.items():
        if isinstance(attr, (staticmethod, classmethod)):
            continue
        if not inspect.isfunction(attr):
            continue
        signature = describe_method(cls, klass, name, attr)
        if signature is not None:
            signatures.append(signature)
    return signatures


def describe_method(
    owner: type, declaring_class: type, name: str, function: Callable[..., Any]
) -> MethodSignature | None:
    """Build a :class:`MethodSignature`, or None when ``function`` takes no ``self``."""
    try:
        parameters = list(inspect.signature(function).parameters.values())
    except (TypeError, ValueError):
        return None
    if not parameters or parameters[0].kind not in _POSITIONAL:
        return None
    parameters = parameters[1:]

    variadic = any(
        p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        or (p.kind == inspect.Parameter.KEYWORD_ONLY and p.default is _EMPTY)
        for p in parameters
    )
    positional = [p for p in parameters if p.kind in _POSITIONAL]

    hint_error = None
    try:
        hints = typing.get_type_hints(
            function,
            localns={declaring_class.__name__: declaring_class, owner.__name__: owner},
            include_extras=True,
        )
    except Exception as exc:  # annotations are arbitrary user expressions
        hints = {}
        hint_error = exc

    return MethodSignature(
        name=name,
        owner=owner,
        declaring_class=declaring_class,
        function=function,
        param_types=tuple(hints.get(p.name, _EMPTY) for p in positional),
        return_type=hints.get("return", _EMPTY),
        variadic=variadic,
        hint_error=hint_error,
    )


__all__ = ["MethodSignature", "scan_methods", "describe_method"]
