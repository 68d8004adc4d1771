"""Runtime settings loaded from environment variables."""

from dataclasses import dataclass

from api_dispatch.core.config.schema import ConfigSchema
from api_dispatch.core.config.validation import load_env_var


@dataclass(frozen=True)
class DispatchSettings:
    """Settings that wire a registry to its configuration file and transport.

    Attributes:
        config_file: Path of the TOML provider configuration
        log_level: Root logging level used by the CLI
        request_timeout: Default transport timeout in seconds
    """

    config_file: str
    log_level: str
    request_timeout: float

    @staticmethod
    def load() -> "DispatchSettings":
        """Load settings using schema-based validation.

        Raises:
            EnvConfigError: If any environment variable fails validation
        """
        return DispatchSettings(
            config_file=load_env_var(ConfigSchema.CONFIG_FILE),
            log_level=load_env_var(ConfigSchema.LOG_LEVEL),
            request_timeout=load_env_var(ConfigSchema.REQUEST_TIMEOUT),
        )
