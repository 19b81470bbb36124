"""Identity token claim and key set models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class IdTokenClaims(BaseModel):
    """Claims carried by a Logto identity token.

    ``exp`` is exposed but not enforced by verification; callers that
    depend on expiry should compare it against the current time.
    """

    sub: str
    aud: str | list[str]
    exp: int
    iat: int
    iss: str
    at_hash: str | None = None
    username: str | None = None
    name: str | None = None
    avatar: str | None = None


class JsonWebKeySet(BaseModel):
    """JSON Web Key Set (RFC 7517 Section 5).

    Keys rotate, so lookups happen per verification and nothing is cached.
    """

    keys: list[dict[str, Any]]

    def find(self, kid: str) -> dict[str, Any] | None:
        """Return the key whose ``kid`` matches, if any."""
        for key in self.keys:
            if key.get("kid") == kid:
                return key
        return None
