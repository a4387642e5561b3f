"""
Request building, delivery and response decoding for the Duo API.
"""

from __future__ import annotations

from duo_http.api.client import DuoClient, DuoRequest
from duo_http.api.request import PreparedCall, RequestDescriptor, prepare_request
from duo_http.api.response import ResponseEnvelope
from duo_http.api.transport import AsyncRetryingTransport, RetryingTransport, compute_backoff_ms

__all__ = [
    "DuoClient",
    "DuoRequest",
    "RequestDescriptor",
    "PreparedCall",
    "prepare_request",
    "ResponseEnvelope",
    "RetryingTransport",
    "AsyncRetryingTransport",
    "compute_backoff_ms",
]
