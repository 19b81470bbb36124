"""Security-related models for the authorization code flow.

Contains PKCE parameters and the state value bound to one sign-in attempt.
"""

from __future__ import annotations

from dataclasses import dataclass, field

CODE_CHALLENGE_METHOD = "S256"


@dataclass(frozen=True)
class PKCEParameters:
    """PKCE (Proof Key for Code Exchange) parameters for one sign-in attempt.

    Immutable parameters generated for each authorization flow to prevent
    authorization code interception attacks (RFC 7636). The caller holds
    them until the code exchange and must not reuse them afterwards.
    """

    code_verifier: str = field()
    code_challenge: str = field()
    state: str = field()
    code_challenge_method: str = field(default=CODE_CHALLENGE_METHOD)

    def __post_init__(self) -> None:
        """Validate PKCE parameters meet RFC 7636 requirements."""
        if not (43 <= len(self.code_verifier) <= 128):
            raise ValueError("code_verifier must be 43-128 characters")
        if not (43 <= len(self.code_challenge) <= 128):
            raise ValueError("code_challenge must be 43-128 characters")
        if not self.state:
            raise ValueError("state must not be empty")
        if self.code_challenge_method != CODE_CHALLENGE_METHOD:
            raise ValueError("Only S256 code challenge method is supported")
