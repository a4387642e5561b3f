"""
Core module for duo-http.

Contains configuration management and the exception hierarchy.
"""

from __future__ import annotations

from duo_http.core.config import (
    DuoClientConfig,
    DuoCredentials,
    DuoHttpSettings,
    ProxyConfig,
    get_settings,
)
from duo_http.core.exceptions import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    ConfigurationError,
    DuoHttpError,
    EncodingError,
    MissingCredentialsError,
    ProtocolError,
    SigningError,
    TransportError,
    UnsupportedMethodError,
)

__all__ = [
    # Settings
    "get_settings",
    "DuoHttpSettings",
    "DuoCredentials",
    "DuoClientConfig",
    "ProxyConfig",
    # Exceptions
    "DuoHttpError",
    "ConfigurationError",
    "MissingCredentialsError",
    "SigningError",
    "EncodingError",
    "UnsupportedMethodError",
    "APIError",
    "TransportError",
    "APIConnectionError",
    "APITimeoutError",
    "ProtocolError",
]
