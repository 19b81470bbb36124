import base64
import time
from typing import Any

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from logto.auth.models.id_token import JsonWebKeySet

KID = "123"
CLIENT_ID = "qux"
ISSUER = "foo"


def _b64url_uint(value: int) -> str:
    raw = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def public_key_to_jwk(public_key, kid: str) -> dict[str, Any]:
    """Export a cryptography RSA public key to a JWK with the given kid."""
    numbers = public_key.public_numbers()
    return {
        "kty": "RSA",
        "use": "sig",
        "alg": "RS256",
        "kid": kid,
        "n": _b64url_uint(numbers.n),
        "e": _b64url_uint(numbers.e),
    }


@pytest.fixture
def kid() -> str:
    return KID


@pytest.fixture
def client_id() -> str:
    return CLIENT_ID


@pytest.fixture
def issuer() -> str:
    return ISSUER


@pytest.fixture
def jwk_for():
    """Export a public key as a JWK; the factory takes (public_key, kid)."""
    return public_key_to_jwk


@pytest.fixture(scope="session")
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def jwks(signing_key) -> JsonWebKeySet:
    return JsonWebKeySet(keys=[public_key_to_jwk(signing_key.public_key(), KID)])


@pytest.fixture
def make_id_token(signing_key):
    """Build a signed ID token; keyword arguments override claims."""

    def _make(
        key=None, headers: dict[str, Any] | None = None, **overrides: Any
    ) -> str:
        now = int(time.time())
        claims = {
            "sub": "bar",
            "iss": ISSUER,
            "aud": CLIENT_ID,
            "exp": now + 3600,
            "iat": now,
        }
        claims.update(overrides)
        claims = {k: v for k, v in claims.items() if v is not None}
        return jwt.encode(
            claims,
            key or signing_key,
            algorithm="RS256",
            headers={"kid": KID} if headers is None else headers,
        )

    return _make
