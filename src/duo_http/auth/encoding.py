"""
Query string encoding for signed Duo API requests.

The encoded query string is part of the canonical request, so the remote
verifier recomputes it byte for byte. Encoding starts from form encoding
(space as ``+``) and is then corrected to RFC 3986:

    ``+`` -> ``%20``, ``*`` -> ``%2A``, ``%7E`` -> ``~``

Parameters are sorted by name and joined as ``name=value`` pairs with ``&``.
"""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import quote_plus

from duo_http.core.exceptions import EncodingError

_RFC3986_FIXUPS: tuple[tuple[str, str], ...] = (
    ("+", "%20"),
    ("*", "%2A"),
    ("%7E", "~"),
)


def encode_component(text: str) -> str:
    """
    Percent-encode a single parameter name or value.

    Args:
        text: Parameter name or value

    Returns:
        UTF-8 percent-encoded text

    Raises:
        EncodingError: If text is not a string or cannot be encoded as UTF-8

    Example:
        >>> encode_component("b c")
        'b%20c'
        >>> encode_component("y*z~")
        'y%2Az~'
    """
    if not isinstance(text, str):
        raise EncodingError(
            f"Parameter names and values must be strings, got {type(text).__name__}",
            context={"value": text},
        )

    try:
        encoded = quote_plus(text, safe="", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Cannot encode parameter as UTF-8: {e.reason}") from e

    for old, new in _RFC3986_FIXUPS:
        encoded = encoded.replace(old, new)
    return encoded


def canonical_query_string(params: Mapping[str, str]) -> str:
    """
    Build the sorted, encoded query string for a parameter mapping.

    Sorting is by parameter name in code point order, which for UTF-8
    text is the same as byte order.

    Args:
        params: Parameter names mapped to values

    Returns:
        ``name=value`` pairs joined with ``&`` (empty string for no params)

    Raises:
        EncodingError: If a name or value cannot be encoded
    """
    pairs = []
    for key in sorted(params):
        pairs.append(f"{encode_component(key)}={encode_component(params[key])}")
    return "&".join(pairs)
