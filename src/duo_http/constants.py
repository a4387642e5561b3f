"""
Constants and default values for duo-http.

This module provides centralized configuration for:
- Retry and backoff limits for rate-limited requests
- Supported HTTP methods and content types
- Header names used by the signing scheme
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Duo API Configuration
# =============================================================================


class DuoAPIConfig:
    """Duo REST API configuration constants."""

    SCHEME: Final[str] = "https"

    DEFAULT_TIMEOUT: Final[int] = 60
    DEFAULT_SIG_VERSION: Final[int] = 2
    SIG_VERSIONS: Final[tuple[int, ...]] = (1, 2)

    # Rate limiting
    MAX_REQUEST_ATTEMPTS: Final[int] = 8
    BACKOFF_FACTOR: Final[int] = 2
    MAX_BACKOFF_MS: Final[int] = 32000
    BASE_BACKOFF_MS: Final[int] = 1000
    MAX_JITTER_MS: Final[int] = 1000
    RATE_LIMITED_STATUS: Final[int] = 429


class HTTPMethods:
    """HTTP methods accepted by the request builder."""

    # Methods that carry parameters in the URL query string
    QUERY_METHODS: Final[frozenset[str]] = frozenset({"GET", "DELETE"})
    # Methods that carry parameters in a form-encoded body
    BODY_METHODS: Final[frozenset[str]] = frozenset({"POST", "PUT"})

    SUPPORTED: Final[frozenset[str]] = QUERY_METHODS | BODY_METHODS


class Headers:
    """Header names and values used on signed requests."""

    AUTHORIZATION: Final[str] = "Authorization"
    DATE: Final[str] = "Date"
    CONTENT_TYPE: Final[str] = "Content-Type"

    FORM_ENCODED: Final[str] = "application/x-www-form-urlencoded"


class ResponseStat:
    """Values of the `stat` field in the JSON response envelope."""

    OK: Final[str] = "OK"
