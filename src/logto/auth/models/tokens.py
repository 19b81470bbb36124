"""Token endpoint request and response models.

Requests are immutable value objects that know their form encoding.
Responses are validated with pydantic so a malformed body is rejected
before any token reaches the caller.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from pydantic import BaseModel

AUTHORIZATION_CODE_GRANT = "authorization_code"
REFRESH_TOKEN_GRANT = "refresh_token"


@dataclass(frozen=True)
class TokenRequest:
    """Authorization code exchange parameters (RFC 6749 Section 4.1.3).

    Includes the PKCE code_verifier (RFC 7636) and the optional resource
    indicator (RFC 8707).
    """

    token_endpoint: str
    code: str
    code_verifier: str
    client_id: str
    redirect_uri: str
    resource: str | None = None

    def to_form_data(self) -> dict[str, str]:
        """Convert to form data for application/x-www-form-urlencoded request.

        Token requests must use form encoding, not JSON (RFC 6749 Section 4.1.3).

        Returns:
            Dictionary suitable for httpx data parameter
        """
        data = {
            "client_id": self.client_id,
            "code": self.code,
            "code_verifier": self.code_verifier,
            "redirect_uri": self.redirect_uri,
            "grant_type": AUTHORIZATION_CODE_GRANT,
        }

        if self.resource:
            data["resource"] = self.resource

        return data


@dataclass(frozen=True)
class RefreshTokenRequest:
    """Refresh token grant parameters (RFC 6749 Section 6)."""

    token_endpoint: str
    refresh_token: str
    client_id: str
    scopes: tuple[str, ...] | list[str] | None = None
    resource: str | None = None

    def to_form_data(self) -> dict[str, str]:
        """Convert to form data. Blank scopes are dropped, never sent."""
        data = {
            "client_id": self.client_id,
            "refresh_token": self.refresh_token,
            "grant_type": REFRESH_TOKEN_GRANT,
        }

        scopes = [scope for scope in self.scopes or () if scope.strip()]
        if scopes:
            data["scope"] = " ".join(scopes)
        if self.resource:
            data["resource"] = self.resource

        return data


@dataclass(frozen=True)
class RevocationRequest:
    """Token revocation parameters (RFC 7009)."""

    revocation_endpoint: str
    client_id: str
    token: str

    def to_form_data(self) -> dict[str, str]:
        return {"client_id": self.client_id, "token": self.token}


class _TokenSet(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    scope: str
    expires_in: int  # Seconds until expiry

    def calculate_expires_at(self) -> float:
        """Calculate absolute expiry timestamp from expires_in."""
        return time.time() + self.expires_in


class CodeTokenResponse(_TokenSet):
    """Token set returned by the authorization code grant.

    The ID token is always present because ``openid`` is always requested.
    """

    refresh_token: str | None = None
    id_token: str


class RefreshTokenResponse(_TokenSet):
    """Token set returned by the refresh token grant.

    The refresh token is always present; the ID token may be omitted.
    """

    refresh_token: str
    id_token: str | None = None
