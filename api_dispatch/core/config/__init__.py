"""Configuration for api_dispatch.

- ConfigSource: the provider configuration tree (dotted-path lookups)
- DispatchSettings: process settings read from environment variables
"""

from api_dispatch.core.config.settings import DispatchSettings
from api_dispatch.core.config.source import ConfigSource
from api_dispatch.core.config.validation import EnvConfigError, validate_all

__all__ = [
    "ConfigSource",
    "DispatchSettings",
    "EnvConfigError",
    "validate_all",
]
