"""
Shared pytest fixtures and configuration for beanschema tests.

This module provides:
- Registry and settings cleanup fixtures for test isolation
- Sample bean instances
- Auto-marking of unit tests
"""

import sys
from pathlib import Path

import pytest

# Ensure beanschema and the tests package are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from beanschema.registry import clear_registry
from beanschema.settings import get_settings
from tests._support.beans import make_account, make_order, make_person


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "concurrency"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_state():
    """Reset the process-wide registry and cached settings around each test."""
    clear_registry()
    get_settings.cache_clear()
    yield
    clear_registry()
    get_settings.cache_clear()


# =============================================================================
# Sample Beans
# =============================================================================


@pytest.fixture
def account():
    """Scenario account: id=7, name="x"."""
    return make_account()


@pytest.fixture
def person():
    return make_person()


@pytest.fixture
def order():
    return make_order()
