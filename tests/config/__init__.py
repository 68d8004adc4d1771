"""Test configuration module for api_dispatch tests."""

from .providers import TEST_CONFIG_TOML, TEST_CREDENTIALS, TEST_PROVIDERS

__all__ = [
    "TEST_CONFIG_TOML",
    "TEST_CREDENTIALS",
    "TEST_PROVIDERS",
]
