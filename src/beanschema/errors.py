"""
Structured error types for beanschema.

Provides a typed error hierarchy for everything that can go wrong while
deriving a schema from a bean class, binding its accessors, or building
instances from field values. Every error carries the offending class and
field so the failure can be traced to a specific accessor without a debugger.

Manifesto:
    - **Typed Error Hierarchy:** One error type per structural incompatibility
    - **Never Retryable:** Bean classes do not change during a process lifetime
    - **Rich Context:** Errors carry class, field, method and accessor kind
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                      BeanSchemaError                             │
        │        (category, retryable=False, context, cause)               │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  SchemaError          BindingError        CreatorError           │
        │  (SCHEMA)             (BINDING)           (CREATOR)              │
        │      │                    │                   │                  │
        │  DuplicateFieldError  MissingAccessor     NoDefaultConstructor   │
        │  CyclicSchemaError                        TypeMismatchError      │
        │  UnsupportedTypeError                     ValueCountError        │
        │                                                                  │
        │  ConfigError                                                     │
        │  (CONFIG)                                                        │
        │      │                                                           │
        │  InvalidConfigError                                              │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    Missing setter for a schema field:

    >>> error = MissingAccessorError("foo", "setter", target_class=Person)
    >>> error.field_name
    'foo'
    >>> error.context.target_class
    'Person'

    Serializing for structured logging:

    >>> error.to_dict()["category"]
    'BINDING'

Guardrails:
    ❌ DON'T: Raise bare ValueError/TypeError from binding code
    ✅ DO: Use the BeanSchemaError subclass that names the failure

    ❌ DON'T: Drop a field that cannot be bound
    ✅ DO: Raise, naming the class and the field

Tags:
    error-handling, exception-hierarchy, error-context, beanschema

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Categories follow the stage that failed:
    - **SCHEMA:** deriving the field set and types of a class
    - **BINDING:** projecting getters/setters onto a derived schema
    - **CREATOR:** allocating and populating a new instance
    - **CONFIG:** invalid settings
    - **INTERNAL / UNKNOWN:** bugs and uncategorized errors
    """

    SCHEMA = "SCHEMA"             # Field derivation, type mapping
    BINDING = "BINDING"           # Accessor projection
    CREATOR = "CREATOR"           # Instance construction
    CONFIG = "CONFIG"             # Invalid settings
    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"           # Uncategorized errors


def _class_name(cls: Any) -> str | None:
    if cls is None:
        return None
    if isinstance(cls, str):
        return cls
    return getattr(cls, "__qualname__", None) or repr(cls)


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        target_class: Qualified name of the bean class being processed
        field_name: Schema field involved in the failure
        method_name: Accessor method involved in the failure
        accessor_kind: "getter" or "setter"
        metadata: Additional key-value pairs
    """

    target_class: str | None = None
    field_name: str | None = None
    method_name: str | None = None
    accessor_kind: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["target_class", "field_name", "method_name", "accessor_kind"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class BeanSchemaError(Exception):
    """
    Base exception for all beanschema errors.

    All instances carry:
    - **category:** ErrorCategory for classification
    - **retryable:** Always False by default; structural errors do not heal
    - **context:** ErrorContext naming class, field, method
    - **cause:** Optional underlying exception for chaining

    Subclasses set ``default_category`` to route themselves.

    Examples:
        >>> error = BeanSchemaError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.retryable
        False
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> BeanSchemaError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SchemaError("No getters").with_context(target_class="Person")
        """
        for key, value in kwargs.items():
            if key == "target_class":
                value = _class_name(value)
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SCHEMA ERRORS
# =============================================================================


class SchemaError(BeanSchemaError):
    """A schema could not be derived for a class."""

    default_category = ErrorCategory.SCHEMA


class DuplicateFieldError(SchemaError):
    """
    Two accessors resolve to the same field name.

    Raised for ``getActive()`` next to ``isActive()``, or for two methods
    renamed onto one field with ``@schema_field_name``.
    """

    def __init__(
        self,
        field_name: str,
        *,
        target_class: Any = None,
        methods: tuple[str, ...] = (),
        accessor_kind: str | None = None,
    ):
        self.field_name = field_name
        self.methods = tuple(methods)
        class_name = _class_name(target_class)
        message = f"Field '{field_name}' of {class_name} is declared by more than one accessor"
        if self.methods:
            message += f": {', '.join(self.methods)}"
        super().__init__(
            message,
            context=ErrorContext(
                target_class=class_name,
                field_name=field_name,
                accessor_kind=accessor_kind,
                metadata={"methods": list(self.methods)} if self.methods else {},
            ),
        )


class CyclicSchemaError(SchemaError):
    """A bean class reaches itself through its nested field types."""

    def __init__(self, target_class: Any, path: tuple[Any, ...] = ()):
        self.target_class = target_class
        self.path = tuple(_class_name(c) for c in path)
        class_name = _class_name(target_class)
        chain = " -> ".join(self.path + (class_name,)) if self.path else class_name
        super().__init__(
            f"Cyclic schema detected for {class_name}: {chain}",
            context=ErrorContext(
                target_class=class_name,
                metadata={"path": list(self.path)},
            ),
        )


class UnsupportedTypeError(SchemaError):
    """An accessor declares a type that has no schema representation."""

    def __init__(
        self,
        message: str,
        *,
        target_class: Any = None,
        field_name: str | None = None,
        method_name: str | None = None,
        cause: Exception | None = None,
    ):
        self.field_name = field_name
        super().__init__(
            message,
            context=ErrorContext(
                target_class=_class_name(target_class),
                field_name=field_name,
                method_name=method_name,
            ),
            cause=cause,
        )


# =============================================================================
# BINDING ERRORS
# =============================================================================


class BindingError(BeanSchemaError):
    """Accessors of a class could not be projected onto a schema."""

    default_category = ErrorCategory.BINDING


class MissingAccessorError(BindingError):
    """A schema field has no matching getter or setter on the class."""

    def __init__(self, field_name: str, kind: str, *, target_class: Any = None):
        self.field_name = field_name
        self.kind = kind
        class_name = _class_name(target_class)
        super().__init__(
            f"{class_name} has no {kind} for schema field '{field_name}'",
            context=ErrorContext(
                target_class=class_name,
                field_name=field_name,
                accessor_kind=kind,
            ),
        )


# =============================================================================
# CREATOR ERRORS
# =============================================================================


class CreatorError(BeanSchemaError):
    """An instance could not be created from field values."""

    default_category = ErrorCategory.CREATOR


class NoDefaultConstructorError(CreatorError):
    """The target class cannot be constructed without arguments."""

    def __init__(self, target_class: Any, *, cause: Exception | None = None):
        self.target_class = target_class
        class_name = _class_name(target_class)
        super().__init__(
            f"{class_name} has no accessible no-argument constructor",
            context=ErrorContext(target_class=class_name),
            cause=cause,
        )


class TypeMismatchError(CreatorError):
    """A supplied value cannot be converted to its setter's declared type."""

    def __init__(
        self,
        field_name: str,
        expected_type: str,
        actual_type: str,
        *,
        target_class: Any = None,
    ):
        self.field_name = field_name
        self.expected_type = expected_type
        self.actual_type = actual_type
        class_name = _class_name(target_class)
        super().__init__(
            f"Field '{field_name}' of {class_name} expects {expected_type}, got {actual_type}",
            context=ErrorContext(
                target_class=class_name,
                field_name=field_name,
                accessor_kind="setter",
                metadata={"expected_type": expected_type, "actual_type": actual_type},
            ),
        )


class ValueCountError(CreatorError):
    """The value array does not have one value per schema field."""

    def __init__(self, expected: int, actual: int, *, target_class: Any = None):
        self.expected = expected
        self.actual = actual
        class_name = _class_name(target_class)
        super().__init__(
            f"{class_name} expects {expected} field values, got {actual}",
            context=ErrorContext(
                target_class=class_name,
                metadata={"expected": expected, "actual": actual},
            ),
        )


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(BeanSchemaError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, message: str, *, key: str | None = None, value: Any = None):
        self.key = key
        self.value = value
        context = ErrorContext()
        if key is not None:
            context.metadata["config_key"] = key
            context.metadata["config_value"] = value
        super().__init__(message, context=context)


# =============================================================================
# HELPERS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, BeanSchemaError):
        return error.retryable
    return False


def categorize_error(error: Exception) -> ErrorCategory:
    """Categorize an arbitrary exception."""
    if isinstance(error, BeanSchemaError):
        return error.category
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "BeanSchemaError",
    "SchemaError",
    "DuplicateFieldError",
    "CyclicSchemaError",
    "UnsupportedTypeError",
    "BindingError",
    "MissingAccessorError",
    "CreatorError",
    "NoDefaultConstructorError",
    "TypeMismatchError",
    "ValueCountError",
    "ConfigError",
    "InvalidConfigError",
    "is_retryable",
    "categorize_error",
]
