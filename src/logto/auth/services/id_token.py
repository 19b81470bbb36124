"""Identity token verification.

Verifies RS256-signed ID tokens against the provider's JSON Web Key Set,
pinning audience and issuer, and checks that the token was issued within
the allowed clock skew. Claim extraction without verification is a
separate function with a deliberately different name.
"""

from __future__ import annotations

import logging
import time

import jwt
from pydantic import ValidationError

from logto.auth.models.errors import (
    ExpiredSignatureError,
    InvalidSignatureError,
    InvalidTokenError,
    UnsupportedKeyAlgorithmError,
)
from logto.auth.models.id_token import IdTokenClaims, JsonWebKeySet

logger = logging.getLogger(__name__)

SIGNING_ALGORITHM = "RS256"
CLOCK_SKEW_SECONDS = 60

# exp is carried in the claims but not enforced here.
_DECODE_OPTIONS = {
    "verify_exp": False,
    "verify_iat": False,
    "require": ["sub", "exp", "iat"],
}


def verify_id_token(
    id_token: str,
    client_id: str,
    issuer: str,
    jwks: JsonWebKeySet,
    now: float | None = None,
) -> None:
    """Verify an identity token, raising on the first failed check.

    Args:
        id_token: Compact-serialized JWT from the token response
        client_id: Expected audience
        issuer: Expected issuer, from the discovery document
        jwks: Current key set of the provider
        now: Current Unix time, defaults to the system clock

    Raises:
        InvalidTokenError: If the header is malformed or has no ``kid``
        InvalidSignatureError: If no key matches ``kid``, or signature,
            audience, issuer or claim shape checks fail
        UnsupportedKeyAlgorithmError: If the matching key is not RSA
        ExpiredSignatureError: If ``iat`` is more than 60s away from now
    """
    try:
        header = jwt.get_unverified_header(id_token)
    except jwt.PyJWTError as e:
        raise InvalidTokenError(f"Malformed ID token header: {e}") from e

    kid = header.get("kid")
    if not kid:
        raise InvalidTokenError("ID token header is missing kid")

    jwk = jwks.find(kid)
    if jwk is None:
        logger.debug("No key in the key set matches the ID token kid")
        raise InvalidSignatureError("ID token signature verification failed")

    if jwk.get("kty") != "RSA":
        raise UnsupportedKeyAlgorithmError(
            f"Unsupported key type for ID token verification: {jwk.get('kty')}"
        )

    try:
        signing_key = jwt.PyJWK(jwk, algorithm=SIGNING_ALGORITHM)
        payload = jwt.decode(
            id_token,
            signing_key.key,
            algorithms=[SIGNING_ALGORITHM],
            audience=client_id,
            issuer=issuer,
            options=_DECODE_OPTIONS,
        )
        claims = IdTokenClaims.model_validate(payload)
    except (jwt.PyJWTError, ValidationError) as e:
        logger.debug(f"ID token verification failed: {type(e).__name__}")
        raise InvalidSignatureError("ID token signature verification failed") from e

    current_time = time.time() if now is None else now
    if not (
        current_time - CLOCK_SKEW_SECONDS
        <= claims.iat
        <= current_time + CLOCK_SKEW_SECONDS
    ):
        raise ExpiredSignatureError("ID token iat is outside the allowed clock skew")

    logger.debug(f"ID token verified for subject {claims.sub}")


def decode_claims_unverified(id_token: str) -> IdTokenClaims:
    """Decode ID token claims WITHOUT checking the signature.

    The result is for display and inspection only and must never back an
    authorization decision. Use ``verify_id_token`` first.

    Raises:
        InvalidTokenError: If the token cannot be decoded into claims
    """
    try:
        payload = jwt.decode(id_token, options={"verify_signature": False})
        return IdTokenClaims.model_validate(payload)
    except jwt.PyJWTError as e:
        raise InvalidTokenError(f"Malformed ID token: {e}") from e
    except ValidationError as e:
        raise InvalidTokenError("ID token payload is missing required claims") from e
