"""beanschema -- derive row schemas and accessor tables from bean classes.

Manifesto:
    Row-oriented data models need a schema for every user value object.
    Hand-writing those schemas duplicates what the class already says through
    its getters and setters, and drifts the moment the class changes.
    ``beanschema`` reads the accessors instead and guarantees that getters,
    setters and constructors agree field for field.

Architecture::

    scanner.py       Public, non-static methods of a class (MRO, override wins)
    conventions.py   Pluggable getter/setter classification (bean, snake, annotated)
    resolver.py      Getter/setter → FieldTypeDescriptor, annotation → FieldType
    deriver.py       Canonical Schema (fields sorted by name, cycle guarded)
    binder.py        Getter/setter AccessorTables projected onto the Schema
    coercion.py      Setter value coercion
    creator.py       InstanceCreator (no-arg constructor + ordered setters)
    provider.py      BeanSchemaProvider facade + nested row functions
    registry.py      Single-flight class → BeanBinding cache

    errors.py        Structured error hierarchy
    logging.py       structlog configuration
    settings.py      pydantic-settings configuration

Examples:
    >>> from beanschema import derive_schema, bind_getters, bind_setters, make_creator
    >>> schema = derive_schema(Account)
    >>> values = bind_getters(Account, schema).extract(account)
    >>> make_creator(Account, bind_setters(Account, schema))(values) == account
    True

Tags:
    beanschema, schema, reflection, accessor-binding, row-model

Doc-Types:
    package-overview, module-index
"""

from beanschema.binder import Accessor, AccessorTable, bind_getters, bind_setters
from beanschema.conventions import (
    AccessorConvention,
    AccessorKind,
    AnnotatedConvention,
    BeanConvention,
    SnakeCaseConvention,
    get_convention,
    schema_field_name,
    schema_ignore,
)
from beanschema.creator import InstanceCreator, make_creator
from beanschema.deriver import derive_schema
from beanschema.errors import (
    BeanSchemaError,
    BindingError,
    ConfigError,
    CreatorError,
    CyclicSchemaError,
    DuplicateFieldError,
    ErrorCategory,
    InvalidConfigError,
    MissingAccessorError,
    NoDefaultConstructorError,
    SchemaError,
    TypeMismatchError,
    UnsupportedTypeError,
    ValueCountError,
)
from beanschema.provider import BeanSchemaProvider
from beanschema.registry import BeanBinding, SchemaRegistry, clear_registry, get_binding
from beanschema.resolver import FieldTypeDescriptor, GetterResolver, SetterResolver
from beanschema.scanner import MethodSignature, scan_methods
from beanschema.types import (
    Field,
    FieldType,
    Float32,
    Int8,
    Int16,
    Int32,
    Int64,
    Schema,
    TypeName,
)

__version__ = "0.1.0"

__all__ = [
    # Derivation / binding
    "derive_schema",
    "bind_getters",
    "bind_setters",
    "make_creator",
    "Accessor",
    "AccessorTable",
    "InstanceCreator",
    "BeanSchemaProvider",
    "BeanBinding",
    "SchemaRegistry",
    "get_binding",
    "clear_registry",
    # Reflection
    "MethodSignature",
    "scan_methods",
    "FieldTypeDescriptor",
    "GetterResolver",
    "SetterResolver",
    # Conventions
    "AccessorConvention",
    "AccessorKind",
    "BeanConvention",
    "SnakeCaseConvention",
    "AnnotatedConvention",
    "get_convention",
    "schema_field_name",
    "schema_ignore",
    # Types
    "Schema",
    "Field",
    "FieldType",
    "TypeName",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Float32",
    # Errors
    "ErrorCategory",
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
]
