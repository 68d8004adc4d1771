"""Read-only provider configuration tree with dotted-path lookups.

The tree is keyed by provider name::

    [billing]
    rootUrl = "https://billing.example.com/api"

    [billing.authentication]
    type = "bearer"
    token = "${BILLING_TOKEN}"

    [billing.endpoints]
    listInvoices = "/invoices"
    createInvoice = { url = "/invoices", method = "post" }

String values of the form ``${NAME}`` are replaced with the environment
variable ``NAME`` when the file is loaded.
"""

from __future__ import annotations

import logging
import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _interpolate(value: Any) -> Any:
    """Replace ${NAME} references in string values, recursively.

    A value consisting solely of one reference to an unset variable becomes
    None, so that it reads as "not configured".
    """
    if isinstance(value, str):
        whole = _ENV_REFERENCE.fullmatch(value)
        if whole:
            return os.environ.get(whole.group(1))
        return _ENV_REFERENCE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, Mapping):
        return {key: _interpolate(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_interpolate(item) for item in value]
    return value


def _lookup(node: Any, key: str, default: Any) -> Any:
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return default
        node = node[part]
    return default if node is None else node


class ConfigSource:
    """Nested mapping of provider configuration with dotted-path access.

    Lookups never raise: a missing path, a path crossing a non-mapping value,
    or a value that is None all yield the default.
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: Mapping[str, Any] = data or {}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ConfigSource:
        return cls(_interpolate(data))

    @classmethod
    def from_toml(cls, path: str | Path) -> ConfigSource:
        """Load a configuration tree from a TOML file.

        Raises:
            FileNotFoundError: If the file does not exist
            tomllib.TOMLDecodeError: If the file is not valid TOML
        """
        path = Path(path)
        with path.open("rb") as f:
            data = tomllib.load(f)
        logger.debug("Loaded api provider config from %s (%d providers)", path, len(data))
        return cls(_interpolate(data))

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted path, e.g. ``"billing.authentication.type"``."""
        return _lookup(self._data, key, default)

    def provider(self, provider_name: str | None) -> Mapping[str, Any] | None:
        """Return the configuration subtree of one provider, or None."""
        if not provider_name:
            return None
        subtree = self._data.get(provider_name)
        return subtree if isinstance(subtree, Mapping) else None

    def provider_value(self, provider_name: str | None, key: str, default: Any = None) -> Any:
        """Look up a dotted path inside one provider's subtree.

        Provider names may themselves contain dots, so the name is never
        split.
        """
        subtree = self.provider(provider_name)
        if subtree is None:
            return default
        return _lookup(subtree, key, default)

    def provider_names(self) -> list[str]:
        return [name for name, value in self._data.items() if isinstance(value, Mapping)]

    def __contains__(self, provider_name: object) -> bool:
        return isinstance(provider_name, str) and self.provider(provider_name) is not None
