"""Token exchange and revocation service.

Implements RFC 6749 token endpoint interactions with PKCE (RFC 7636),
Resource Indicators (RFC 8707) and token revocation (RFC 7009).
Nothing is retried here: a replayed authorization code must fail at the
provider, so retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from logto.auth.models.errors import DecodeError, TransportError
from logto.auth.models.tokens import (
    CodeTokenResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    RevocationRequest,
    TokenRequest,
)

logger = logging.getLogger(__name__)

FORM_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class OidcTokenManager:
    """Talks to the token and revocation endpoints.

    Handles:
    - Authorization code to token set exchange (RFC 6749 Section 4.1.3)
    - Refresh token grant (RFC 6749 Section 6)
    - Token revocation (RFC 7009)

    Uses application/x-www-form-urlencoded encoding for every request.
    """

    def __init__(
        self, http_client: httpx.AsyncClient | None = None, timeout: float = 30.0
    ):
        """Initialize the token manager.

        Args:
            http_client: Client to send requests with. When omitted, one is
                created and owned by this manager.
            timeout: HTTP request timeout in seconds for an owned client
        """
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def exchange_code(self, token_request: TokenRequest) -> CodeTokenResponse:
        """Exchange an authorization code for a token set.

        Args:
            token_request: Token exchange request parameters

        Returns:
            CodeTokenResponse: Validated token set

        Raises:
            TransportError: If the request fails or the endpoint answers
                with an HTTP error
            DecodeError: If the body is not a valid token set
        """
        logger.debug(f"Exchanging authorization code at {token_request.token_endpoint}")

        form_data = token_request.to_form_data()
        logger.debug(
            f"Token request: grant_type={form_data['grant_type']}, "
            f"client_id={form_data['client_id']}, "
            f"resource={form_data.get('resource', 'none')}"
        )

        response = await self._post_form(token_request.token_endpoint, form_data)
        token_set = self._parse_token_response(response, CodeTokenResponse)

        logger.info("Authorization code exchange successful")
        return token_set

    async def exchange_refresh_token(
        self, refresh_request: RefreshTokenRequest
    ) -> RefreshTokenResponse:
        """Exchange a refresh token for a new token set.

        Args:
            refresh_request: Refresh token request parameters

        Returns:
            RefreshTokenResponse: Validated token set

        Raises:
            TransportError: If the request fails or the endpoint answers
                with an HTTP error
            DecodeError: If the body is not a valid token set
        """
        logger.debug(f"Refreshing tokens at {refresh_request.token_endpoint}")

        form_data = refresh_request.to_form_data()
        logger.debug(
            f"Refresh request: client_id={form_data['client_id']}, "
            f"scope={form_data.get('scope', 'none')}, "
            f"resource={form_data.get('resource', 'none')}"
        )

        response = await self._post_form(refresh_request.token_endpoint, form_data)
        token_set = self._parse_token_response(response, RefreshTokenResponse)

        logger.info("Refresh token exchange successful")
        return token_set

    async def revoke(self, revocation_request: RevocationRequest) -> None:
        """Revoke a token at the provider.

        Success only means the request went out and a response came back;
        the response body is not inspected.

        Raises:
            TransportError: If the request could not be completed
        """
        logger.debug(
            f"Revoking token at {revocation_request.revocation_endpoint} "
            f"for client {revocation_request.client_id}"
        )

        response = await self._send_form(
            revocation_request.revocation_endpoint, revocation_request.to_form_data()
        )

        if not response.is_success:
            logger.warning(
                f"Revocation endpoint answered with status {response.status_code}"
            )
        else:
            logger.info("Token revocation request completed")

    async def close(self) -> None:
        """Close the HTTP client if this manager created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def _send_form(self, endpoint: str, form_data: dict[str, str]) -> httpx.Response:
        try:
            return await self._http_client.post(
                endpoint, data=form_data, headers=FORM_HEADERS
            )
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error calling {endpoint}: {e}") from e

    async def _post_form(self, endpoint: str, form_data: dict[str, str]) -> httpx.Response:
        """Send a form post and reject any non-2xx status.

        RFC 6749 Section 5.2 error bodies are surfaced on the raised error.
        """
        response = await self._send_form(endpoint, form_data)

        if not response.is_success:
            error, error_description = _read_oauth_error(response)
            logger.warning(
                f"Token endpoint failed with {response.status_code}: "
                f"{error or 'unknown_error'} - {error_description or 'No description provided'}"
            )
            raise TransportError(
                f"Token endpoint returned HTTP {response.status_code}"
                + (f": {error}" if error else ""),
                status_code=response.status_code,
                error=error,
                error_description=error_description,
            )

        return response

    def _parse_token_response(
        self, response: httpx.Response, model: type[ResponseT]
    ) -> ResponseT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise DecodeError(
                f"Invalid token response format: expected {model.__name__}"
            ) from e


def _read_oauth_error(response: httpx.Response) -> tuple[str | None, str | None]:
    try:
        body = response.json()
    except ValueError:
        return None, None
    if not isinstance(body, dict):
        return None, None
    return body.get("error"), body.get("error_description")
