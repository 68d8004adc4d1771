"""Loading of the api-dispatch environment settings.

Each variable in ConfigSchema is read, converted and checked here. The CLI
calls validate_all() at startup so that every bad variable is reported in
one run.
"""

import os
from typing import Any

from api_dispatch.core.config.schema import ConfigSchema, EnvVarSpec
from api_dispatch.core.exceptions import ConfigurationError


class EnvConfigError(ConfigurationError):
    """An environment variable holds a value its EnvVarSpec rejects.

    Attributes:
        env_var: The environment variable name
        value: The raw value as found in the environment
    """

    def __init__(self, env_var: str, value: str, reason: str) -> None:
        self.env_var = env_var
        self.value = value
        super().__init__(f"{env_var}={value!r}: {reason}")


def load_env_var(spec: EnvVarSpec) -> Any:
    """Return the value of one setting, or its default when unset.

    The raw string goes through ``spec.coerce`` when given, else through
    ``spec.type_hint`` (``str`` or ``float``), then through the validator.

    Raises:
        EnvConfigError: If the value cannot be converted or is rejected
    """
    raw_value = os.environ.get(spec.name)
    if raw_value is None:
        return spec.default

    convert = spec.coerce or spec.type_hint
    try:
        value = convert(raw_value)
    except ValueError as e:
        raise EnvConfigError(
            spec.name, raw_value, f"not a valid {spec.type_hint.__name__} ({e})"
        ) from e

    if spec.validator is not None and not spec.validator(value):
        raise EnvConfigError(spec.name, raw_value, spec.description)
    return value


def validate_all() -> list[EnvConfigError]:
    """Check every setting and return all failures instead of the first."""
    errors: list[EnvConfigError] = []
    for spec in ConfigSchema.all_specs().values():
        try:
            load_env_var(spec)
        except EnvConfigError as e:
            errors.append(e)
    return errors
