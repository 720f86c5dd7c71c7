"""
Tests for the logging module.

Tests verify:
- Service metadata and ECS field renaming processors
- configure_logging installs the expected renderer
- Context binding via contextvars
"""

import pytest
import structlog
from structlog.testing import capture_logs

from beanschema.logging import (
    LogContext,
    _add_service_metadata,
    _elasticsearch_compatible,
    bind_context,
    configure_from_settings,
    configure_logging,
    get_logger,
    unbind_context,
)
from beanschema.settings import BeanSchemaSettings


@pytest.fixture(autouse=True)
def reset_structlog():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestProcessors:
    """Test the custom structlog processors."""

    def test_service_metadata_added(self):
        event = _add_service_metadata(None, "info", {"event": "x"})
        assert event["service.name"] == "beanschema"

    def test_service_metadata_not_overwritten(self):
        event = _add_service_metadata(None, "info", {"event": "x", "service.name": "other"})
        assert event["service.name"] == "other"

    def test_elasticsearch_field_names(self):
        event = _elasticsearch_compatible(
            None, "info", {"event": "x", "timestamp": "2024-01-01T00:00:00Z", "level": "info"}
        )
        assert event == {"event": "x", "@timestamp": "2024-01-01T00:00:00Z", "log.level": "info"}


class TestConfigureLogging:
    def test_json_renderer(self):
        configure_logging(level="DEBUG", json_format=True)
        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
        assert _elasticsearch_compatible in config["processors"]
        assert config["cache_logger_on_first_use"] is True

    def test_console_renderer(self):
        configure_logging(level="INFO", json_format=False)
        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.dev.ConsoleRenderer)
        assert _elasticsearch_compatible not in config["processors"]

    def test_without_timestamp(self):
        configure_logging(json_format=True, add_timestamp=False)
        processors = structlog.get_config()["processors"]
        assert not any(isinstance(p, structlog.processors.TimeStamper) for p in processors)

    def test_service_name(self):
        configure_logging(json_format=True, service="orders")
        assert _add_service_metadata(None, "info", {})["service.name"] == "orders"
        configure_logging(json_format=True)

    def test_configure_from_settings(self):
        configure_from_settings(BeanSchemaSettings(log_level="WARNING", log_json=True))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)


class TestContext:
    """Test context binding."""

    def test_bind_and_unbind(self):
        bind_context(target_class="Person", accessor_kind="getter")
        assert structlog.contextvars.get_contextvars() == {
            "target_class": "Person",
            "accessor_kind": "getter",
        }
        unbind_context("accessor_kind")
        assert structlog.contextvars.get_contextvars() == {"target_class": "Person"}

    def test_log_context_scoped(self):
        with LogContext(target_class="Person"):
            assert structlog.contextvars.get_contextvars()["target_class"] == "Person"
        assert "target_class" not in structlog.contextvars.get_contextvars()


class TestGetLogger:
    def test_events_are_structured(self):
        logger = get_logger("tests.logging")
        with capture_logs() as logs:
            logger.info("schema_derived", target_class="Person", fields=["age"])
        assert logs == [
            {
                "event": "schema_derived",
                "log_level": "info",
                "target_class": "Person",
                "fields": ["age"],
            }
        ]
