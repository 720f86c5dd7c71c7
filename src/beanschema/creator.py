"""
Instance creator factory: rebuilds instances from schema-ordered values.

The creator is the counterpart of the getter table. Getters decompose an
instance into a value list in schema order; the creator allocates a fresh
instance with the class's no-argument constructor and feeds the same list
back through the setter table, coercing each value to the setter's declared
type.

    >>> creator = make_creator(Account, bind_setters(Account, schema))
    >>> creator([7, "x"]) == account
    True

Invocations share nothing but the immutable setter table, so one creator
can be called from any number of threads.
"""

from __future__ import annotations

import inspect
from typing import Any, Sequence

from beanschema.binder import AccessorTable
from beanschema.coercion import coerce_value
from beanschema.conventions import AccessorKind
from beanschema.errors import BindingError, NoDefaultConstructorError, ValueCountError
from beanschema.logging import get_logger

logger = get_logger(__name__)


class InstanceCreator:
    """Callable mapping an ordered value list to a new instance of ``target_class``."""

    __slots__ = ("target_class", "setters")

    def __init__(self, target_class: type, setters: AccessorTable):
        self.target_class = target_class
        self.setters = setters

    def __call__(self, values: Sequence[Any]) -> Any:
        if len(values) != len(self.setters):
            raise ValueCountError(len(self.setters), len(values), target_class=self.target_class)

        instance = self.target_class()
        for setter, value in zip(self.setters, values):
            setter.function(
                instance,
                coerce_value(
                    value,
                    setter.type,
                    field_name=setter.name,
                    target_class=self.target_class,
                ),
            )
        return instance

    create = __call__

    def field_names(self) -> list[str]:
        return self.setters.names()

    def __repr__(self) -> str:
        return f"InstanceCreator({self.target_class.__qualname__}, fields={self.field_names()})"


def has_default_constructor(cls: type) -> bool:
    """True when ``cls()`` can be called without arguments."""
    if inspect.isabstract(cls):
        return False
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        # builtins without introspectable signatures
        return True
    return all(
        parameter.default is not inspect.Parameter.empty
        or parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for parameter in signature.parameters.values()
    )


def make_creator(cls: type, setter_table: AccessorTable) -> InstanceCreator:
    """Wrap an ordered setter table into an :class:`InstanceCreator`.

    Raises:
        NoDefaultConstructorError: ``cls`` cannot be instantiated without arguments
        BindingError: ``setter_table`` is not a setter table for ``cls``
    """
    if setter_table.kind != AccessorKind.SETTER:
        raise BindingError(
            f"make_creator needs a setter table, got a {setter_table.kind.value} table"
        ).with_context(target_class=cls, accessor_kind=setter_table.kind.value)
    if not issubclass(cls, setter_table.target_class):
        raise BindingError(
            f"Setter table of {setter_table.target_class.__qualname__} "
            f"does not apply to {cls.__qualname__}"
        ).with_context(target_class=cls)
    if not has_default_constructor(cls):
        raise NoDefaultConstructorError(cls)

    logger.debug("creator_built", target_class=cls.__qualname__, fields=len(setter_table))
    return InstanceCreator(cls, setter_table)


__all__ = ["InstanceCreator", "make_creator", "has_default_constructor"]
