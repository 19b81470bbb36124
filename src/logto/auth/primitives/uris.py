"""URI parsing and query construction helpers."""

from __future__ import annotations

from urllib.parse import SplitResult, parse_qs, urlencode, urlsplit, urlunsplit

from logto.auth.models.errors import UriParseError

HOST_REQUIRED_SCHEMES = frozenset({"http", "https"})


def parse_uri(uri: str) -> SplitResult:
    """Parse an absolute URI.

    Raises:
        UriParseError: If the URI is malformed, has no scheme, or is an
            http(s) URI without a host
    """
    # urlsplit silently strips or drops these instead of rejecting them.
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in uri):
        raise UriParseError(f"Invalid URI {uri!r}: whitespace or control character")

    try:
        parsed = urlsplit(uri)
        parsed.port  # raises ValueError on a non-numeric or out-of-range port
    except ValueError as e:
        raise UriParseError(f"Invalid URI {uri!r}: {e}") from e

    if not parsed.scheme:
        raise UriParseError(f"Invalid URI {uri!r}: missing scheme")
    if parsed.scheme.lower() in HOST_REQUIRED_SCHEMES and not parsed.hostname:
        raise UriParseError(f"Invalid URI {uri!r}: missing host")

    return parsed


def append_query_params(uri: str, params: list[tuple[str, str]]) -> str:
    """Append form-encoded query pairs to a URI, keeping existing ones.

    Pairs are appended in the given order.

    Raises:
        UriParseError: If the URI is malformed
    """
    parsed = parse_uri(uri)
    encoded = urlencode(params)
    query = f"{parsed.query}&{encoded}" if parsed.query else encoded
    return urlunsplit(parsed._replace(query=query))


def get_query_params(uri: str) -> dict[str, str]:
    """Parse the query string of a URI into single values.

    When a parameter repeats, the first occurrence wins.

    Raises:
        UriParseError: If the URI is malformed
    """
    parsed = parse_uri(uri)
    query_params = parse_qs(parsed.query, keep_blank_values=True)
    return {key: values[0] for key, values in query_params.items()}
