"""
duo-http: signed request delivery for the Duo authentication APIs.

This package provides:
- Canonical request construction and HMAC-SHA1 signing (v1 and v2)
- Deterministic query string encoding shared with the remote verifier
- A requests-based transport that retries rate-limited (429) calls
- A small CLI for issuing signed calls and inspecting canonical strings
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
