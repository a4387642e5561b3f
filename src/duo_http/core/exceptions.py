"""
Exception hierarchy for duo-http.

All exceptions inherit from DuoHttpError for unified error handling.
Specific exceptions provide detailed context for debugging.
"""

from __future__ import annotations

from typing import Any


class DuoHttpError(Exception):
    """
    Base exception for all duo-http errors.

    All custom exceptions inherit from this class, allowing callers
    to catch all duo-http errors with a single except clause.

    Attributes:
        message: Human-readable error description
        context: Optional dictionary with additional error context
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DuoHttpError):
    """
    Error in configuration parsing or validation.

    Raised when:
    - Required settings are missing
    - Field values fail validation
    """

    pass


class MissingCredentialsError(ConfigurationError):
    """Required credentials not configured."""

    def __init__(self, missing_fields: list[str] | None = None):
        fields = missing_fields or ["credentials"]
        super().__init__(
            f"Missing required credentials: {', '.join(fields)}",
            context={"missing_fields": fields},
        )


# =============================================================================
# Request Construction Errors
# =============================================================================


class SigningError(DuoHttpError):
    """Error generating the HMAC signature for a request."""

    pass


class EncodingError(DuoHttpError):
    """A parameter name or value could not be encoded for the query string."""

    pass


class UnsupportedMethodError(DuoHttpError):
    """The request was configured with an HTTP method the API does not accept."""

    def __init__(self, method: str):
        super().__init__(f"Unsupported method: {method}", context={"method": method})
        self.method = method


# =============================================================================
# API Client Errors
# =============================================================================


class APIError(DuoHttpError):
    """
    Base class for API-related errors.

    Attributes:
        status_code: HTTP status code (if applicable)
        response_data: Raw response data from API
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ):
        super().__init__(
            message, context={"status_code": status_code, "response_data": response_data}
        )
        self.status_code = status_code
        self.response_data = response_data or {}


class TransportError(APIError):
    """The request could not be delivered to the API endpoint."""

    pass


class APIConnectionError(TransportError):
    """Failed to connect to API endpoint."""

    pass


class APITimeoutError(TransportError):
    """API request timed out."""

    pass


class ProtocolError(APIError):
    """
    The API answered with a failure envelope or an unreadable body.

    Attributes:
        code: Error code supplied by the API (None if the body was unreadable)
        error_message: Error message supplied by the API
    """

    def __init__(
        self,
        code: int | None,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ):
        if code is None:
            text = message
        else:
            text = f"Duo error code ({code}): {message}"
        super().__init__(text, status_code=status_code, response_data=response_data)
        self.code = code
        self.error_message = message
