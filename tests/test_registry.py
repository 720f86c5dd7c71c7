"""
Tests for beanschema.registry.

Covers:
- Identity caching per class
- Single-flight derivation under concurrent access
- Failed derivations are not cached
- Logging context bound during derivation
- Process-wide registry helpers
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
import structlog
from structlog.testing import capture_logs

import beanschema.registry as registry_module
from beanschema.conventions import SnakeCaseConvention
from beanschema.errors import CyclicSchemaError, MissingAccessorError, SchemaError
from beanschema.registry import (
    BeanBinding,
    SchemaRegistry,
    clear_registry,
    get_binding,
    get_registry,
)
from tests._support.beans import Account, Flag, Node, ReadOnly, SnakeBean


class TestSchemaRegistry:
    """Test caching behavior."""

    def test_get_returns_binding(self):
        binding = SchemaRegistry().get(Account)
        assert isinstance(binding, BeanBinding)
        assert binding.target_class is Account
        assert binding.schema.field_names() == ["id", "name"]
        assert binding.getters.names() == binding.setters.names() == ["id", "name"]

    def test_same_binding_on_repeat(self):
        registry = SchemaRegistry()
        first = registry.get(Account)
        second = registry.get(Account)
        assert first is second
        assert registry.derivation_count == 1

    def test_schema_for(self):
        registry = SchemaRegistry()
        assert registry.schema_for(Account) is registry.get(Account).schema

    def test_contains_size_clear(self):
        registry = SchemaRegistry()
        registry.get(Account)
        registry.get(Flag)
        assert registry.contains(Account)
        assert registry.size() == 2

        registry.clear()
        assert not registry.contains(Account)
        assert registry.size() == 0

        registry.get(Account)
        assert registry.derivation_count == 3

    def test_round_trip_values(self, account):
        binding = SchemaRegistry().get(Account)
        values = binding.to_values(account)
        assert values == [7, "x"]
        assert binding.from_values(values) == account

    def test_explicit_convention(self):
        registry = SchemaRegistry(SnakeCaseConvention())
        assert registry.get(SnakeBean).schema.field_names() == ["active", "name"]

    def test_convention_from_settings(self, monkeypatch):
        monkeypatch.setenv("BEANSCHEMA_NAMING_CONVENTION", "snake")
        assert SchemaRegistry().get(SnakeBean).schema.field_names() == ["active", "name"]


class TestFailedDerivations:
    """Test that failures propagate and are retried."""

    def test_failure_propagates(self):
        registry = SchemaRegistry()
        with pytest.raises(CyclicSchemaError):
            registry.get(Node)
        assert not registry.contains(Node)

    def test_failure_not_cached(self):
        registry = SchemaRegistry()
        for _ in range(2):
            with pytest.raises(MissingAccessorError):
                registry.get(ReadOnly)
        assert registry.derivation_count == 2
        assert registry.size() == 0

    def test_failure_then_success(self, monkeypatch):
        real_derive = registry_module.derive_schema
        calls = []

        def flaky_derive(cls, convention=None):
            calls.append(cls)
            if len(calls) == 1:
                raise CyclicSchemaError(cls)
            return real_derive(cls, convention)

        monkeypatch.setattr(registry_module, "derive_schema", flaky_derive)
        registry = SchemaRegistry()

        with pytest.raises(CyclicSchemaError):
            registry.get(Account)
        binding = registry.get(Account)

        assert binding.schema.field_names() == ["id", "name"]
        assert len(calls) == 2

    def test_failure_logged(self):
        with capture_logs() as logs:
            with pytest.raises(MissingAccessorError):
                SchemaRegistry().get(ReadOnly)
        failures = [entry for entry in logs if entry["event"] == "binding_derivation_failed"]
        assert len(failures) == 1
        assert failures[0]["log_level"] == "warning"
        assert failures[0]["target_class"] == "ReadOnly"
        assert failures[0]["error"]["error_type"] == "MissingAccessorError"
        assert failures[0]["error"]["category"] == "BINDING"

    def test_non_class_raises_schema_error(self):
        registry = SchemaRegistry()
        with capture_logs() as logs:
            with pytest.raises(SchemaError):
                registry.get(42)
        failures = [entry for entry in logs if entry["event"] == "binding_derivation_failed"]
        assert failures[0]["target_class"] == "42"
        assert failures[0]["error"]["error_type"] == "SchemaError"
        assert not registry.contains(42)


class TestDerivationContext:
    """Test the logging context bound while a class is derived."""

    def test_target_class_bound_during_derivation(self, monkeypatch):
        real_derive = registry_module.derive_schema
        seen = []

        def recording_derive(cls, convention=None):
            seen.append(structlog.contextvars.get_contextvars())
            return real_derive(cls, convention)

        monkeypatch.setattr(registry_module, "derive_schema", recording_derive)
        SchemaRegistry().get(Account)

        assert len(seen) == 1
        assert seen[0]["target_class"] == "Account"
        assert "target_class" not in structlog.contextvars.get_contextvars()

    def test_context_unbound_after_failure(self):
        with pytest.raises(MissingAccessorError):
            SchemaRegistry().get(ReadOnly)
        assert "target_class" not in structlog.contextvars.get_contextvars()


@pytest.mark.concurrency
class TestSingleFlight:
    """Test concurrent first access."""

    def test_one_derivation_for_concurrent_callers(self, monkeypatch):
        real_derive = registry_module.derive_schema
        calls = []
        calls_lock = threading.Lock()

        def slow_derive(cls, convention=None):
            with calls_lock:
                calls.append(cls)
            time.sleep(0.05)
            return real_derive(cls, convention)

        monkeypatch.setattr(registry_module, "derive_schema", slow_derive)
        registry = SchemaRegistry()
        workers = 16
        barrier = threading.Barrier(workers)

        def fetch(_):
            barrier.wait()
            return registry.get(Account)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            bindings = list(pool.map(fetch, range(workers)))

        assert calls == [Account]
        assert registry.derivation_count == 1
        assert all(binding is bindings[0] for binding in bindings)

    def test_distinct_classes_derive_independently(self):
        registry = SchemaRegistry()
        classes = [Account, Flag] * 8

        with ThreadPoolExecutor(max_workers=8) as pool:
            bindings = list(pool.map(registry.get, classes))

        assert registry.derivation_count == 2
        assert {binding.target_class for binding in bindings} == {Account, Flag}


class TestProcessRegistry:
    def test_get_registry_is_shared(self):
        assert get_registry() is get_registry()

    def test_get_binding_uses_shared_registry(self):
        binding = get_binding(Account)
        assert get_registry().get(Account) is binding

    def test_clear_registry(self):
        first = get_binding(Account)
        registry = get_registry()
        clear_registry()
        assert get_registry() is not registry
        assert get_binding(Account) is not first
