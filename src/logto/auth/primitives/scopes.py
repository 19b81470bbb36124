"""Scope and resource normalization for sign-in requests."""

from __future__ import annotations

from collections.abc import Iterable

# Reserved scopes
OPENID = "openid"
OFFLINE_ACCESS = "offline_access"

# User scopes
PROFILE = "profile"
EMAIL = "email"
PHONE = "phone"
CUSTOM_DATA = "custom_data"
IDENTITIES = "identities"

DEFAULT_SCOPES = frozenset({OPENID, OFFLINE_ACCESS, PROFILE})


def with_default_scopes(scopes: Iterable[str] | None = None) -> list[str]:
    """Merge requested scopes with the scopes every sign-in must ask for.

    Args:
        scopes: Caller-requested scopes, possibly with duplicates

    Returns:
        Sorted, de-duplicated scopes always including openid,
        offline_access and profile
    """
    return sorted(DEFAULT_SCOPES.union(scopes or ()))


def dedupe_ordered(values: Iterable[str] | None) -> list[str]:
    """Remove duplicates while keeping first-seen order."""
    if values is None:
        return []
    return list(dict.fromkeys(values))
