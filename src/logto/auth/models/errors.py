"""Exception hierarchy for the OIDC authorization code flow.

Provides specific exception types for each failure mode so callers can
react precisely. Messages never carry verifiers, codes or tokens.
"""

from __future__ import annotations


class LogtoError(Exception):
    """Base exception for all Logto client errors."""

    pass


class UriParseError(LogtoError):
    """Raised when an endpoint or callback URI is malformed."""

    pass


class AuthorizationCallbackError(LogtoError):
    """Raised when the redirect back from the authorization server is invalid.

    This indicates the callback URI handed to us by the browser cannot be
    trusted, not that our callback handling code failed.
    """

    pass


class RedirectMismatchError(AuthorizationCallbackError):
    """Raised when the callback URI does not extend the expected redirect URI."""

    pass


class ProviderError(AuthorizationCallbackError):
    """Raised when the callback carries an ``error`` parameter.

    The raw provider values are kept for diagnostics.
    """

    def __init__(
        self, error: str, error_description: str | None = None
    ) -> None:
        self.error = error
        self.error_description = error_description
        message = f"Authorization server returned error: {error}"
        if error_description:
            message += f" ({error_description})"
        super().__init__(message)


class StateMismatchError(AuthorizationCallbackError):
    """Raised when the callback state is missing or differs from the expected one.

    Either case could indicate a CSRF attack, so both share one error kind.
    """

    pass


class MissingAuthorizationCodeError(AuthorizationCallbackError):
    """Raised when an otherwise valid callback lacks the ``code`` parameter."""

    pass


class TransportError(LogtoError):
    """Raised when an endpoint cannot be reached or answers with an HTTP error."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error: str | None = None,
        error_description: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.error = error
        self.error_description = error_description
        super().__init__(message)


class DecodeError(LogtoError):
    """Raised when a response body does not match the expected shape."""

    pass


class IdTokenError(LogtoError):
    """Base exception for identity token verification failures."""

    pass


class InvalidTokenError(IdTokenError):
    """Raised when the token header or payload is malformed or lacks ``kid``."""

    pass


class InvalidSignatureError(IdTokenError):
    """Raised when no key matches ``kid`` or signature/claim checks fail.

    Unknown keys and bad signatures are reported identically.
    """

    pass


class ExpiredSignatureError(IdTokenError):
    """Raised when ``iat`` falls outside the allowed clock-skew window."""

    pass


class UnsupportedKeyAlgorithmError(IdTokenError):
    """Raised when the matching key is not an RSA key.

    This is an integration fault (the provider is expected to sign ID tokens
    with RSA only), not a recoverable verification failure.
    """

    pass
