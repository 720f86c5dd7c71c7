"""
Schema registry: process-wide cache of derived bindings per class.

Deriving a schema and binding accessors walks the class with reflection, so
callers that convert many instances keep the result. The derivation core is
stateless; this registry is the one place that holds state.

Manifesto:
    - **Single-flight:** at most one derivation in flight per class
    - **No negative caching:** a failed derivation is retried on next access
    - **Process lifetime:** entries stay until ``clear()``

Architecture:
    ::

        get(cls)
          │  hit ─────────────────────────────► BeanBinding
          │  miss
          ▼
        per-class lock ──► re-check ──► derive_schema
                                        bind_getters
                                        bind_setters
                                        make_creator ──► store ──► BeanBinding

Examples:
    >>> binding = get_binding(Account)
    >>> binding.schema.field_names()
    ['id', 'name']
    >>> binding.from_values(binding.to_values(account)) == account
    True

Guardrails:
    ❌ DON'T: Cache inside derive_schema or the binder
    ✅ DO: Put caching here, keyed by class

Tags:
    registry, cache, single-flight, thread-safe, beanschema

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Sequence

from beanschema.binder import AccessorTable, bind_getters, bind_setters
from beanschema.conventions import AccessorConvention
from beanschema.creator import InstanceCreator, make_creator
from beanschema.deriver import derive_schema
from beanschema.errors import BeanSchemaError
from beanschema.logging import LogContext, get_logger
from beanschema.types import Schema

logger = get_logger(__name__)


@dataclass(frozen=True)
class BeanBinding:
    """Schema, accessor tables and creator derived for one class."""

    target_class: type
    schema: Schema
    getters: AccessorTable
    setters: AccessorTable
    creator: InstanceCreator

    def to_values(self, instance: Any) -> list[Any]:
        return self.getters.extract(instance)

    def from_values(self, values: Sequence[Any]) -> Any:
        return self.creator(values)


class SchemaRegistry:
    """Thread-safe class → :class:`BeanBinding` cache with single-flight derivation."""

    def __init__(self, convention: AccessorConvention | None = None):
        self._convention = convention
        self._bindings: dict[type, BeanBinding] = {}
        self._class_locks: dict[type, threading.Lock] = {}
        self._lock = threading.Lock()
        self._derivations = 0

    @property
    def derivation_count(self) -> int:
        """Number of derivations attempted, successful or not."""
        return self._derivations

    def get(self, cls: type) -> BeanBinding:
        """Return the binding of ``cls``, deriving it on first access."""
        binding = self._bindings.get(cls)
        if binding is not None:
            return binding

        with self._lock:
            class_lock = self._class_locks.setdefault(cls, threading.Lock())

        with class_lock:
            binding = self._bindings.get(cls)
            if binding is not None:
                return binding
            name = getattr(cls, "__qualname__", repr(cls))
            try:
                with LogContext(target_class=name):
                    binding = self._derive(cls)
            except BeanSchemaError as exc:
                logger.warning(
                    "binding_derivation_failed",
                    target_class=name,
                    error=exc.to_dict(),
                )
                raise
            with self._lock:
                self._bindings[cls] = binding
            logger.debug(
                "binding_cached",
                target_class=name,
                fields=binding.schema.field_names(),
            )
            return binding

    def schema_for(self, cls: type) -> Schema:
        return self.get(cls).schema

    def contains(self, cls: type) -> bool:
        return cls in self._bindings

    def size(self) -> int:
        return len(self._bindings)

    def clear(self) -> None:
        """Drop every cached binding (for testing)."""
        with self._lock:
            self._bindings.clear()
            self._class_locks.clear()

    def _derive(self, cls: type) -> BeanBinding:
        with self._lock:
            self._derivations += 1
        convention = self._convention
        if convention is None:
            from beanschema.settings import default_convention

            convention = default_convention()

        schema = derive_schema(cls, convention)
        getters = bind_getters(cls, schema, convention)
        setters = bind_setters(cls, schema, convention)
        return BeanBinding(
            target_class=cls,
            schema=schema,
            getters=getters,
            setters=setters,
            creator=make_creator(cls, setters),
        )


_default_registry: SchemaRegistry | None = None
_default_lock = threading.Lock()


def get_registry() -> SchemaRegistry:
    """Return the process-wide registry, creating it lazily."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = SchemaRegistry()
    return _default_registry


def get_binding(cls: type) -> BeanBinding:
    """Binding of ``cls`` from the process-wide registry."""
    return get_registry().get(cls)


def clear_registry() -> None:
    """Clear the process-wide registry (for testing)."""
    global _default_registry
    with _default_lock:
        _default_registry = None


__all__ = [
    "BeanBinding",
    "SchemaRegistry",
    "get_registry",
    "get_binding",
    "clear_registry",
]
