"""OpenID Provider discovery models.

Contains the subset of the OpenID Connect Discovery 1.0 document the
authorization code flow needs.
"""

from __future__ import annotations

from pydantic import BaseModel


class OidcProviderConfig(BaseModel):
    """OpenID Provider Metadata (OpenID Connect Discovery 1.0 Section 3).

    Fetched once per session and treated as immutable; caching and
    refreshing it is the caller's concern.
    """

    issuer: str
    authorization_endpoint: str
    token_endpoint: str
    end_session_endpoint: str
    revocation_endpoint: str
    jwks_uri: str
