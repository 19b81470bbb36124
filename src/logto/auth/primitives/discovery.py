"""OpenID Provider discovery primitive.

Fetches the OpenID Connect Discovery document and the JSON Web Key Set it
points to. Each call performs exactly one GET; caching and refresh policy
belong to the caller.
"""

from __future__ import annotations

import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from logto.auth.models.discovery import OidcProviderConfig
from logto.auth.models.errors import DecodeError, TransportError
from logto.auth.models.id_token import JsonWebKeySet

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class OidcDiscovery:
    """Fetches provider metadata and signing keys."""

    def __init__(
        self, http_client: httpx.AsyncClient | None = None, timeout: float = 30.0
    ):
        """Initialize OIDC discovery.

        Args:
            http_client: Client to send requests with. When omitted, one is
                created and owned by this instance.
            timeout: HTTP request timeout in seconds for an owned client
        """
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def fetch_oidc_config(self, discovery_endpoint: str) -> OidcProviderConfig:
        """Fetch and parse the OpenID Provider configuration.

        Args:
            discovery_endpoint: URL of ``/.well-known/openid-configuration``

        Returns:
            Parsed provider configuration

        Raises:
            TransportError: If the request fails or returns an HTTP error
            DecodeError: If the document is not valid provider metadata
        """
        config = await self._fetch(discovery_endpoint, OidcProviderConfig)
        logger.debug(f"Discovered OIDC configuration for issuer {config.issuer}")
        return config

    async def fetch_jwks(self, jwks_uri: str) -> JsonWebKeySet:
        """Fetch the provider's current JSON Web Key Set.

        Raises:
            TransportError: If the request fails or returns an HTTP error
            DecodeError: If the document is not a key set
        """
        jwks = await self._fetch(jwks_uri, JsonWebKeySet)
        logger.debug(f"Fetched {len(jwks.keys)} keys from {jwks_uri}")
        return jwks

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def _fetch(self, url: str, model: type[ModelT]) -> ModelT:
        try:
            logger.debug(f"Fetching {model.__name__} from: {url}")
            response = await self._http_client.get(
                url, headers={"Accept": "application/json"}
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Failed to fetch {url}: {e}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error fetching {url}: {e}") from e

        try:
            return model.model_validate_json(response.text)
        except ValidationError as e:
            raise DecodeError(f"Invalid {model.__name__} from {url}: {e}") from e
