"""
Featurescope client for variation lookups.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, NoReturn, Optional, Sequence, Union

import httpx

from featurescope.config import ClientConfig
from featurescope.errors import (
    FeaturesClientNotImplementedError,
    FeaturesResponseError,
    FeaturesServiceError,
    FeaturesTransportError,
)
from featurescope.query import Demographics, build_variation_params

logger = logging.getLogger("featurescope")

JsonValue = Any
Features = Dict[str, JsonValue]


def build_headers(config: ClientConfig) -> Dict[str, str]:
    """
    Merge user headers with the headers the service requires.

    Content-Type is always forced to JSON, and Authorization is added
    only when an API key is configured.
    """
    headers = {
        name: value
        for name, value in config.headers.items()
        if name.lower() != "content-type"
    }
    headers["Content-Type"] = "application/json"

    if config.api_key:
        headers = {name: value for name, value in headers.items() if name.lower() != "authorization"}
        headers["Authorization"] = f"Bearer {config.api_key}"

    return headers


class FeaturesClient:
    """
    Featurescope feature variation client.

    Example:
        ```python
        client = featurescope.init({"api_key": "your-api-key", "scope": "web"})

        features = await client.get_features({"country": "fr", "age": 30})
        banner = await client.get_feature("banner", {"country": "fr"})
        ```
    """

    def __init__(self, config: ClientConfig, http_client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the client. No request is made here.

        Args:
            config: Client configuration
            http_client: Optional caller-owned client used for every request
        """
        self._config = config
        self._headers = build_headers(config)
        self._http_client = http_client

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def scope(self) -> str:
        return self._config.scope

    @property
    def headers(self) -> Dict[str, str]:
        """Headers sent with every request (a copy)."""
        return dict(self._headers)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return

        timeout = self._config.timeout_ms / 1000 if self._config.timeout_ms > 0 else None
        async with httpx.AsyncClient(timeout=timeout) as http_client:
            yield http_client

    async def _fetch(
        self,
        path: str,
        params: Optional[Mapping[str, str]] = None,
        method: str = "GET",
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> JsonValue:
        """
        Execute one request and unwrap the response envelope.

        Args:
            path: Path relative to the API URL
            params: Query parameters, URL-encoded by httpx
            method: HTTP method
            json: Optional JSON request body
            headers: Per-call headers; the client headers take precedence

        Returns:
            The envelope's ``data`` member

        Raises:
            FeaturesTransportError: On network failure or a non-2xx status
            FeaturesResponseError: If the body is not a JSON object
            FeaturesServiceError: If the envelope reports errors
        """
        url = f"{self._config.api_url}{path}"
        request_headers = httpx.Headers(headers or {})
        request_headers.update(self._headers)

        logger.debug(f"{method.upper()} {url} params={dict(params or {})}")
        try:
            async with self._session() as http_client:
                response = await http_client.request(
                    method.upper(),
                    url,
                    params=params,
                    json=json,
                    headers=request_headers,
                )
        except httpx.HTTPError as e:
            logger.debug(f"Request to {url} failed: {e}")
            raise FeaturesTransportError() from e

        if not response.is_success:
            logger.debug(f"Request to {url} returned {response.status_code}")
            raise FeaturesTransportError()

        try:
            payload = response.json()
        except ValueError as e:
            raise FeaturesResponseError("Response body is not valid JSON", response.status_code) from e

        if not isinstance(payload, dict):
            raise FeaturesResponseError(status_code=response.status_code)

        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            logger.debug(f"Service reported errors for {url}: {errors}")
            raise FeaturesServiceError(errors)

        return payload.get("data")

    async def list_scopes_for_user(self) -> List[str]:
        """List the scopes available to the authenticated caller."""
        return await self._fetch("/api/v1/scopes")

    async def list_features_for_scope(self, scope: str) -> List[str]:
        """
        List the features registered under a scope.

        Args:
            scope: Scope to list; need not be the configured scope
        """
        return await self._fetch("/api/v1/features", params={"scope": scope})

    async def find_features_list_variations_by_demographics(
        self,
        demographics: Optional[Demographics] = None,
        feature_ids: Optional[Sequence[str]] = None,
    ) -> Features:
        """
        Resolve feature variations for a set of demographics.

        Args:
            demographics: Attributes describing the subject
            feature_ids: Restrict the lookup to these features; all features
                in the configured scope otherwise

        Returns:
            Mapping of feature id to variation, holding only the features
            the service returned
        """
        params = build_variation_params(self._config.scope, demographics, feature_ids)
        return await self._fetch("/api/v1/variations", params=params)

    async def find_feature_variation_by_demographics(
        self,
        feature_id: str,
        demographics: Optional[Demographics] = None,
    ) -> JsonValue:
        """
        Resolve a single feature's variation.

        Returns:
            The variation, or None if the service omitted the feature

        Raises:
            FeaturesResponseError: If the variations payload is not an object
        """
        features = await self.find_features_list_variations_by_demographics(
            demographics, feature_ids=[feature_id]
        )
        if not isinstance(features, dict):
            raise FeaturesResponseError("Variations payload is not a JSON object")
        return features.get(feature_id)

    get_feature = find_feature_variation_by_demographics
    get_features = find_features_list_variations_by_demographics

    # Reserved for the write/administration API.

    def create_feature_variation(self, *args: Any, **kwargs: Any) -> NoReturn:
        raise FeaturesClientNotImplementedError("create_feature_variation")

    def create_feature_variations(self, *args: Any, **kwargs: Any) -> NoReturn:
        raise FeaturesClientNotImplementedError("create_feature_variations")

    def get_all_variations_for_feature(self, *args: Any, **kwargs: Any) -> NoReturn:
        raise FeaturesClientNotImplementedError("get_all_variations_for_feature")

    def get_all_variations_for_features_list(self, *args: Any, **kwargs: Any) -> NoReturn:
        raise FeaturesClientNotImplementedError("get_all_variations_for_features_list")


def init(
    options: Union[ClientConfig, Mapping[str, Any], str, None] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FeaturesClient:
    """
    Create a client from any accepted option shape.

    Args:
        options: None, an API key string, a mapping of option fields,
            or a ClientConfig
        http_client: Optional caller-owned httpx client

    Returns:
        A ready-to-use FeaturesClient

    Raises:
        FeaturesClientInitError: If the options cannot be resolved
    """
    return FeaturesClient(ClientConfig.from_options(options), http_client=http_client)
