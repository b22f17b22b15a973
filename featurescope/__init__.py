"""
Featurescope Python SDK - feature variations by demographics.

Usage:
    import featurescope

    client = featurescope.init("your-api-key")

    variation = await client.get_feature("checkout-button", {"country": "fr"})
"""

from featurescope.client import FeaturesClient, Features, JsonValue, build_headers, init
from featurescope.config import (
    ClientConfig,
    DEFAULT_API_URL,
    DEFAULT_SCOPE,
    DEFAULT_TIMEOUT_MS,
)
from featurescope.errors import (
    ErrorCategory,
    FeaturesClientError,
    FeaturesClientInitError,
    FeaturesClientNotImplementedError,
    FeaturesResponseError,
    FeaturesServiceError,
    FeaturesTransportError,
)
from featurescope.query import Demographics, build_variation_params

__version__ = "0.1.0"
__all__ = [
    # Client
    "init",
    "FeaturesClient",
    "build_headers",
    "Features",
    "JsonValue",
    # Config
    "ClientConfig",
    "DEFAULT_API_URL",
    "DEFAULT_SCOPE",
    "DEFAULT_TIMEOUT_MS",
    # Query
    "Demographics",
    "build_variation_params",
    # Errors
    "ErrorCategory",
    "FeaturesClientError",
    "FeaturesClientInitError",
    "FeaturesClientNotImplementedError",
    "FeaturesResponseError",
    "FeaturesServiceError",
    "FeaturesTransportError",
]
