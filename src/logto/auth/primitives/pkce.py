"""PKCE (Proof Key for Code Exchange) primitives.

Implements RFC 7636 parameter generation to prevent authorization code
interception attacks. Only the S256 method is supported; plain-text PKCE
is never offered.
"""

from __future__ import annotations

import base64
import hashlib
import secrets

from logto.auth.models.security import PKCEParameters

# Raw entropy drawn before encoding. 64 bytes encode to 86 URL-safe
# characters, inside the 43-128 range RFC 7636 allows.
RANDOM_BYTES = 64


def generate_code_verifier() -> str:
    """Generate a cryptographically secure code verifier.

    RFC 7636 Section 4.1: code verifier must be 43-128 characters long
    and use only unreserved characters. URL-safe base64 without padding
    satisfies both.

    Returns:
        An 86-character code verifier
    """
    return _generate_random_string()


def generate_code_challenge(code_verifier: str) -> str:
    """Generate code challenge from code verifier using S256 method.

    RFC 7636 Section 4.2: For S256, the code challenge is:
    BASE64URL-ENCODE(SHA256(ASCII(code_verifier)))

    Args:
        code_verifier: The code verifier to hash

    Returns:
        Base64url-encoded SHA256 hash of the code verifier, without padding
    """
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def generate_state() -> str:
    """Generate a cryptographically secure state parameter.

    Same construction as the code verifier; the value binds the callback
    to the sign-in attempt that produced it (CSRF protection).
    """
    return _generate_random_string()


def _generate_random_string() -> str:
    return secrets.token_urlsafe(RANDOM_BYTES)


class PKCEManager:
    """Produces the per-attempt secrets for a sign-in.

    Every call returns fresh values; nothing is pooled or cached, so
    concurrent sign-in attempts never share a verifier or state.
    """

    def generate_parameters(self) -> PKCEParameters:
        """Generate new PKCE parameters for an authorization flow.

        Returns:
            PKCEParameters: Immutable parameters for the authorization flow
        """
        code_verifier = generate_code_verifier()
        return PKCEParameters(
            code_verifier=code_verifier,
            code_challenge=generate_code_challenge(code_verifier),
            state=generate_state(),
        )
