"""Authorization flow models.

Contains the sign-in and sign-out request shapes and the parsed callback.
"""

from __future__ import annotations

from dataclasses import dataclass

from logto.auth.models.security import CODE_CHALLENGE_METHOD
from logto.auth.primitives.scopes import dedupe_ordered, with_default_scopes
from logto.auth.primitives.uris import append_query_params

RESPONSE_TYPE = "code"
DEFAULT_PROMPT = "consent"


@dataclass(frozen=True)
class SignInUriGenerationOptions:
    """Authorization request parameters for the sign-in redirect."""

    authorization_endpoint: str
    client_id: str
    redirect_uri: str
    code_challenge: str
    state: str
    scopes: tuple[str, ...] | list[str] | None = None
    resources: tuple[str, ...] | list[str] | None = None  # RFC 8707
    prompt: str | None = None
    interaction_mode: str | None = None

    def build_signin_uri(self) -> str:
        """Build the complete authorization URL.

        Parameters are appended in a fixed order so generated URIs are
        stable across calls.

        Raises:
            UriParseError: If ``authorization_endpoint`` is not a valid URI
        """
        params = [
            ("client_id", self.client_id),
            ("redirect_uri", self.redirect_uri),
            ("code_challenge", self.code_challenge),
            ("code_challenge_method", CODE_CHALLENGE_METHOD),
            ("state", self.state),
            ("response_type", RESPONSE_TYPE),
            ("scope", " ".join(with_default_scopes(self.scopes))),
            ("prompt", DEFAULT_PROMPT if self.prompt is None else self.prompt),
        ]

        resources = dedupe_ordered(self.resources)
        if resources:
            params.append(("resource", " ".join(resources)))
        if self.interaction_mode is not None:
            params.append(("interaction_mode", self.interaction_mode))

        return append_query_params(self.authorization_endpoint, params)


@dataclass(frozen=True)
class SignOutUriGenerationOptions:
    """End-session request parameters."""

    end_session_endpoint: str
    client_id: str
    post_logout_redirect_uri: str | None = None

    def build_signout_uri(self) -> str:
        """Build the end-session URL.

        Raises:
            UriParseError: If ``end_session_endpoint`` is not a valid URI
        """
        params = [("client_id", self.client_id)]
        if self.post_logout_redirect_uri is not None:
            params.append(("post_logout_redirect_uri", self.post_logout_redirect_uri))

        return append_query_params(self.end_session_endpoint, params)


@dataclass(frozen=True)
class AuthorizationResponse:
    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None

    def is_error(self) -> bool:
        return self.error is not None
