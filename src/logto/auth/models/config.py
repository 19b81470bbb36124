"""Client configuration for a Logto application."""

from __future__ import annotations

from pydantic import BaseModel

from logto.auth.primitives.scopes import dedupe_ordered, with_default_scopes


class LogtoConfig(BaseModel):
    """Settings identifying the Logto tenant and what to request from it.

    Passed in explicitly by the application; nothing is read from the
    environment.
    """

    endpoint: str
    app_id: str
    scopes: list[str] | None = None
    resources: list[str] | None = None
    prompt: str | None = None

    @property
    def discovery_endpoint(self) -> str:
        """URL of the OpenID Provider configuration document."""
        return f"{self.endpoint.rstrip('/')}/oidc/.well-known/openid-configuration"

    def normalize(self) -> LogtoConfig:
        """Return a copy with default scopes added and resources de-duplicated."""
        return self.model_copy(
            update={
                "scopes": with_default_scopes(self.scopes),
                "resources": (
                    dedupe_ordered(self.resources)
                    if self.resources is not None
                    else None
                ),
            }
        )
