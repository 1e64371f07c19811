"""Pytest configuration and fixtures."""

import os

import pytest

from specforge.core import create_container, get_settings
from specforge.generator import GenerateOptions, generate
from specforge.runtime import WidgetHost
from specforge.spec import create_default_spec, example_counter_spec


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["SPECFORGE_LOG_LEVEL"] = "DEBUG"
    os.environ["SPECFORGE_ENABLE_CACHE"] = "false"  # Disable cache in tests


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def di_container():
    """Dependency injection container for testing."""
    return create_container()


# ============================================================================
# Spec Fixtures
# ============================================================================

@pytest.fixture
def minimal_spec():
    """Smallest valid spec: no state, no actions."""
    return create_default_spec(id="minimal-widget")


@pytest.fixture
def counter_spec():
    """Click counter spec with state, triggers, ports and a subscription."""
    return example_counter_spec()


@pytest.fixture
def inc_spec():
    """One number field, one increment action bound to click."""
    return create_default_spec(
        id="inc-widget",
        state={"count": {"type": "number", "default": 0}},
        events={"triggers": {"onClick": ["inc"]}},
        actions={
            "inc": {
                "type": "incrementState",
                "description": "Increment",
                "params": {"stateKey": "count", "amount": 1},
            }
        },
    )


@pytest.fixture
def counter_package(counter_spec):
    """Generated package of the counter spec."""
    return generate(counter_spec, GenerateOptions())


# ============================================================================
# Runtime Fixtures
# ============================================================================

@pytest.fixture
def host():
    """Empty widget host."""
    return WidgetHost()
