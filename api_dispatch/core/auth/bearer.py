"""Bearer token authentication."""

from __future__ import annotations

from typing import Any

from api_dispatch.core.auth.base import AuthenticationStrategy, SendableRequest
from api_dispatch.core.config.source import ConfigSource
from api_dispatch.core.endpoints import HttpMethod
from api_dispatch.core.exceptions import MissingCredentialsError

_NOT_LOADED = object()


class BearerStrategy(AuthenticationStrategy):
    """Sends ``Authorization: Bearer <token>`` with every request.

    The token is resolved at call time: an explicitly set token wins,
    otherwise ``authentication.token`` is read from the provider
    configuration on first access and memoized.
    """

    def __init__(
        self,
        config: ConfigSource | None = None,
        provider_name: str | None = None,
        token: str | None = None,
    ) -> None:
        super().__init__(config, provider_name)
        self.token = token
        self._configured_token: Any = _NOT_LOADED

    def set_token(self, token: str) -> BearerStrategy:
        self.token = token
        return self

    def get_token(self) -> str:
        """Return the token to send.

        Raises:
            MissingCredentialsError: If no token is set or configured
        """
        if self.token:
            return self.token

        if self._configured_token is _NOT_LOADED:
            self._configured_token = self._config_value("authentication.token")

        if not self._configured_token:
            raise MissingCredentialsError(
                f"No bearer token found for api provider {self.provider_name!r}",
                provider=self.provider_name,
            )
        return str(self._configured_token)

    def _authenticate(self, method: HttpMethod, url: str, data: dict[str, Any]) -> SendableRequest:
        token = self.get_token()
        return self._build(method, url, data, headers={"Authorization": f"Bearer {token}"})
