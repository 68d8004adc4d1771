"""Environment settings of api-dispatch.

Every variable the package reads is declared once in ConfigSchema; its
description doubles as the error text when a value is rejected.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class EnvVarSpec:
    """One environment variable.

    Attributes:
        name: Environment variable name (e.g., "LOG_LEVEL")
        default: Value used when the variable is unset
        type_hint: Converter applied to the raw string (str or float)
        description: What a valid value looks like
        validator: Optional check on the converted value
        coerce: Optional converter used instead of type_hint
    """

    name: str
    default: Any
    type_hint: type
    description: str
    validator: Callable[[Any], bool] | None = None
    coerce: Callable[[str], Any] | None = None


class ConfigSchema:
    """All environment variables read by api-dispatch."""

    CONFIG_FILE = EnvVarSpec(
        name="API_DISPATCH_CONFIG_FILE",
        default="api-dispatch.toml",
        type_hint=str,
        description="must be a non-empty path to the TOML provider configuration",
        validator=lambda x: bool(x.strip()),
    )

    LOG_LEVEL = EnvVarSpec(
        name="LOG_LEVEL",
        default="INFO",
        type_hint=str,
        description="must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL",
        # Tolerate trailing comments, e.g. "DEBUG  # verbose"
        coerce=lambda x: x.split()[0].upper() if x.split() else x,
        validator=lambda x: x in VALID_LOG_LEVELS,
    )

    REQUEST_TIMEOUT = EnvVarSpec(
        name="REQUEST_TIMEOUT",
        default=30.0,
        type_hint=float,
        description="must be a positive number of seconds",
        validator=lambda x: x > 0,
    )

    @classmethod
    def all_specs(cls) -> dict[str, EnvVarSpec]:
        """Return all environment variable specs keyed by variable name."""
        return {
            value.name: value for value in vars(cls).values() if isinstance(value, EnvVarSpec)
        }
