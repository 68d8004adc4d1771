"""Shared pytest configuration and fixtures for api_dispatch tests."""

import pytest

from api_dispatch.core.config.source import ConfigSource
from api_dispatch.core.registry import ClientRegistry
from api_dispatch.core.transport import HttpxTransport
from tests.config import TEST_PROVIDERS

# Import HTTP mocking fixtures from fixtures module
pytest_plugins = ["tests.fixtures.mock_http"]

SETTINGS_ENV_VARS = ("API_DISPATCH_CONFIG_FILE", "LOG_LEVEL", "REQUEST_TIMEOUT")


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, no external deps)")
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (configured providers, mocked transport)",
    )


def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "tests/integration/" in path:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep settings environment variables from leaking into tests."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_source():
    """Configuration tree with the shared test providers."""
    return ConfigSource.from_mapping(TEST_PROVIDERS)


@pytest.fixture
def transport():
    with HttpxTransport(timeout=5) as transport:
        yield transport


@pytest.fixture
def registry(config_source, transport):
    """A fresh registry per test, sharing one httpx transport."""
    registry = ClientRegistry(config_source, transport=transport)
    yield registry
    registry.clear()
