"""
Authentication module for the Duo API.
"""

from __future__ import annotations

from duo_http.auth.encoding import canonical_query_string, encode_component
from duo_http.auth.hmac import (
    AuthHeaders,
    build_canonical_request,
    format_rfc2822_date,
    generate_auth_headers,
    sign_hmac,
    sign_request,
)

__all__ = [
    "encode_component",
    "canonical_query_string",
    "format_rfc2822_date",
    "build_canonical_request",
    "sign_hmac",
    "generate_auth_headers",
    "sign_request",
    "AuthHeaders",
]
