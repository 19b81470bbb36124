"""Sign-in, sign-out and callback handling for the authorization code flow.

Builds the browser-navigated authorization and end-session URLs and
verifies the redirect the browser brings back before the authorization
code is trusted.
"""

from __future__ import annotations

import logging
import secrets

from logto.auth.models.errors import (
    MissingAuthorizationCodeError,
    ProviderError,
    RedirectMismatchError,
    StateMismatchError,
)
from logto.auth.models.flow import (
    AuthorizationResponse,
    SignInUriGenerationOptions,
    SignOutUriGenerationOptions,
)
from logto.auth.primitives.uris import get_query_params

logger = logging.getLogger(__name__)


def generate_signin_uri(options: SignInUriGenerationOptions) -> str:
    """Generate the URL the user visits to sign in.

    Args:
        options: Authorization request parameters

    Returns:
        Authorization URL with PKCE, state and normalized scopes

    Raises:
        UriParseError: If the authorization endpoint is not a valid URI
    """
    signin_uri = options.build_signin_uri()
    logger.debug(f"Generated sign-in URI for client {options.client_id}")
    return signin_uri


def generate_signout_uri(options: SignOutUriGenerationOptions) -> str:
    """Generate the end-session URL.

    Raises:
        UriParseError: If the end-session endpoint is not a valid URI
    """
    signout_uri = options.build_signout_uri()
    logger.debug(f"Generated sign-out URI for client {options.client_id}")
    return signout_uri


def verify_and_parse_code(
    callback_uri: str, redirect_uri: str, expected_state: str
) -> str:
    """Verify the callback URI and extract the authorization code.

    Checks run in order and the first failure wins:
    redirect prefix, URI syntax, provider error, state, code.

    Args:
        callback_uri: Full URI the browser was redirected to
        redirect_uri: Redirect URI sent in the authorization request
        expected_state: State sent in the authorization request

    Returns:
        The authorization code. The state is not returned; discard it.

    Raises:
        RedirectMismatchError: If the callback does not start with redirect_uri
        UriParseError: If the callback URI is malformed
        ProviderError: If the authorization server reported an error
        StateMismatchError: If state is missing or does not match
        MissingAuthorizationCodeError: If the code parameter is absent
    """
    if not callback_uri.startswith(redirect_uri):
        raise RedirectMismatchError("Callback URI does not start with redirect URI")

    response = _parse_callback_uri(callback_uri)

    if response.is_error():
        logger.warning(
            f"Authorization callback contained error: {response.error} - "
            f"{response.error_description}"
        )
        raise ProviderError(response.error, response.error_description)

    if response.state is None or not secrets.compare_digest(
        response.state.encode("utf-8"), expected_state.encode("utf-8")
    ):
        raise StateMismatchError("State parameter mismatch - possible CSRF attack")

    if not response.code:
        raise MissingAuthorizationCodeError("Missing authorization code")

    logger.info("Authorization callback successful - received authorization code")
    return response.code


def _parse_callback_uri(callback_uri: str) -> AuthorizationResponse:
    query_params = get_query_params(callback_uri)
    return AuthorizationResponse(
        code=query_params.get("code"),
        state=query_params.get("state"),
        error=query_params.get("error"),
        error_description=query_params.get("error_description"),
    )
