"""Configuration for the Featurescope client."""

import logging
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from featurescope.errors import FeaturesClientInitError

logger = logging.getLogger("featurescope")

DEFAULT_API_URL = "https://www.featurescope.io"
DEFAULT_SCOPE = "_"
DEFAULT_TIMEOUT_MS = 5000

# camelCase spellings accepted from JSON-shaped option mappings
_OPTION_ALIASES = {
    "apiKey": "api_key",
    "apiUrl": "api_url",
    "timeout": "timeout_ms",
    "timeoutMs": "timeout_ms",
}


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for the Featurescope client."""

    api_key: Optional[str] = None
    """API key sent as a bearer token. No Authorization header when unset."""

    api_url: str = DEFAULT_API_URL
    """Base URL for the API."""

    headers: Mapping[str, str] = field(default_factory=dict)
    """Extra headers sent with every request."""

    scope: str = DEFAULT_SCOPE
    """Scope used for variation lookups."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    """Request timeout in milliseconds. Zero or less disables the timeout."""

    def __post_init__(self):
        if self.api_key is not None and not isinstance(self.api_key, str):
            raise FeaturesClientInitError("api_key must be a string")

        if not isinstance(self.api_url, str):
            raise FeaturesClientInitError("api_url must be a string")

        if not isinstance(self.headers, Mapping):
            raise FeaturesClientInitError("headers must be a mapping of strings")
        for name, value in self.headers.items():
            if not isinstance(name, str) or not isinstance(value, str):
                raise FeaturesClientInitError(f"header {name!r} must map a string to a string")

        if not isinstance(self.scope, str):
            raise FeaturesClientInitError("scope must be a string")

        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int):
            raise FeaturesClientInitError("timeout_ms must be an integer")

        # frozen dataclass: go through object.__setattr__
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def from_options(cls, options: Union["ClientConfig", Mapping[str, Any], str, None]) -> "ClientConfig":
        """
        Normalize any accepted option shape into a ClientConfig.

        Args:
            options: None, an API key string, a mapping of option fields,
                or an existing ClientConfig

        Returns:
            The resolved configuration

        Raises:
            FeaturesClientInitError: If the options cannot be resolved
        """
        if options is None:
            return cls()
        if isinstance(options, ClientConfig):
            return options
        if isinstance(options, str):
            return cls(api_key=options)
        if not isinstance(options, Mapping):
            raise FeaturesClientInitError(f"unsupported options type {type(options).__name__}")

        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                logger.debug(f"Ignoring unknown option {key!r}")
                continue
            # None means "use the default", as with an absent key
            if value is not None:
                kwargs[name] = value

        return cls(**kwargs)
