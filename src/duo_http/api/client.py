"""
Signed Duo API requests and a credential-bound client.

DuoRequest drives one request through signing, delivery and decoding.
DuoClient binds credentials and a shared HTTP session and issues
DuoRequests for individual API calls.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests
from pydantic import SecretStr

from duo_http.api.request import PreparedCall, RequestDescriptor, prepare_request
from duo_http.api.response import ResponseEnvelope
from duo_http.api.transport import AsyncRetryingTransport, RetryingTransport
from duo_http.auth.hmac import sign_request
from duo_http.constants import DuoAPIConfig
from duo_http.core.config import DuoClientConfig, DuoCredentials, ProxyConfig

logger = logging.getLogger(__name__)


class DuoRequest:
    """
    A single Duo API request: configure, sign, execute.

    Parameters are part of the signature, so changing them drops any
    signature already computed and the request must be signed again.
    Headers, proxy and timeout are not signed and may change freely.

    Usage:
        request = DuoRequest("GET", "api-xxxxxxxx.duosecurity.com", "/auth/v2/check")
        request.add_param("username", "alice")
        request.sign(ikey, skey)
        result = request.execute_request()
    """

    def __init__(
        self,
        method: str,
        host: str,
        path: str,
        timeout: int = DuoAPIConfig.DEFAULT_TIMEOUT,
        transport: RetryingTransport | None = None,
        async_transport: AsyncRetryingTransport | None = None,
    ):
        """
        Initialize the request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            host: API hostname
            path: Request path (e.g. /auth/v2/check)
            timeout: Connect/read timeout in seconds
            transport: Transport for blocking execution
            async_transport: Transport for awaitable execution
        """
        self._unsigned = RequestDescriptor(method=method, host=host, path=path, timeout=timeout)
        self._signed: RequestDescriptor | None = None
        self._transport = transport
        self._async_transport = async_transport

    @property
    def descriptor(self) -> RequestDescriptor:
        """The request as it will be sent (signed, if sign() was called)."""
        return self._signed or self._unsigned

    @property
    def is_signed(self) -> bool:
        return self._signed is not None

    # =========================================================================
    # Configuration
    # =========================================================================

    def add_param(self, name: str, value: str) -> None:
        """Add or replace a request parameter."""
        self._unsigned = self._unsigned.with_param(name, value)
        self._drop_signature()

    def add_params(self, params: Mapping[str, str]) -> None:
        """Add or replace several request parameters."""
        self._unsigned = self._unsigned.with_params(params)
        self._drop_signature()

    def add_header(self, name: str, value: str) -> None:
        """Append a header to the request."""
        self._unsigned = self._unsigned.with_header(name, value)
        if self._signed is not None:
            self._signed = self._signed.with_header(name, value)

    def set_proxy(self, host: str, port: int) -> None:
        """Send the request through an HTTP proxy."""
        self._unsigned = self._unsigned.with_proxy(host, port)
        if self._signed is not None:
            self._signed = self._signed.with_proxy(host, port)

    def set_timeout(self, timeout: int) -> None:
        self._unsigned = self._unsigned.with_timeout(timeout)
        if self._signed is not None:
            self._signed = self._signed.with_timeout(timeout)

    def _drop_signature(self) -> None:
        if self._signed is not None:
            logger.debug(f"Parameters changed, discarding signature for {self._unsigned.path}")
            self._signed = None

    # =========================================================================
    # Signing
    # =========================================================================

    def sign(
        self,
        ikey: str,
        skey: str | SecretStr,
        sig_version: int = DuoAPIConfig.DEFAULT_SIG_VERSION,
        date: str | None = None,
    ) -> None:
        """
        Sign the request, replacing any previous signature.

        Args:
            ikey: Integration key
            skey: Secret key
            sig_version: Signature version, 1 or 2
            date: Optional preformatted date (uses current time if not provided)

        Raises:
            SigningError: For an unknown signature version or digest failure
            EncodingError: If a parameter cannot be encoded
        """
        self._signed = sign_request(self._unsigned, ikey, skey, sig_version=sig_version, date=date)

    # =========================================================================
    # Execution
    # =========================================================================

    def prepare(self) -> PreparedCall:
        """
        Build the outgoing HTTP call.

        Raises:
            UnsupportedMethodError: For any method other than GET, POST, PUT, DELETE
        """
        return prepare_request(self.descriptor)

    def execute_http_request(self) -> requests.Response:
        """
        Send the request, retrying while rate limited.

        Returns:
            The HTTP response (possibly a final 429 once retries run out)

        Raises:
            UnsupportedMethodError: If the method is not supported
            TransportError: If the request cannot be delivered
        """
        call = self.prepare()
        logger.debug(f"API {call.method} {self.descriptor.path}")
        if self._transport is not None:
            return self._transport.execute(call)

        # No shared transport: use a private session for this call only
        transport = RetryingTransport()
        try:
            return transport.execute(call)
        finally:
            transport.close()

    def execute_request_raw(self) -> str:
        """Send the request and return the response body text."""
        return self.execute_http_request().text

    def execute_json_request(self) -> dict[str, Any]:
        """
        Send the request and return the decoded JSON envelope.

        Raises:
            ProtocolError: If the body is not JSON or stat is not "OK"
        """
        return self._decode(self.execute_http_request()).parsed_json

    def execute_request(self) -> Any:
        """
        Send the request and return the ``response`` field of the envelope.

        Raises:
            ProtocolError: If the body is not JSON or stat is not "OK"
        """
        return self._decode(self.execute_http_request()).response

    async def aexecute_http_request(self) -> requests.Response:
        """Awaitable execute_http_request(); backoff sleeps do not block the loop."""
        call = self.prepare()
        logger.debug(f"API {call.method} {self.descriptor.path}")
        if self._async_transport is not None:
            return await self._async_transport.execute(call)

        transport = AsyncRetryingTransport()
        try:
            return await transport.execute(call)
        finally:
            transport.close()

    async def aexecute_request_raw(self) -> str:
        response = await self.aexecute_http_request()
        return response.text

    async def aexecute_json_request(self) -> dict[str, Any]:
        response = await self.aexecute_http_request()
        return self._decode(response).parsed_json

    async def aexecute_request(self) -> Any:
        response = await self.aexecute_http_request()
        return self._decode(response).response

    @staticmethod
    def _decode(response: requests.Response) -> ResponseEnvelope:
        envelope = ResponseEnvelope.parse(response.status_code, response.text)
        envelope.raise_for_stat()
        return envelope


class DuoClient:
    """
    Duo API client bound to one set of credentials.

    Usage:
        # From credentials
        client = DuoClient.from_credentials(creds)

        # Direct instantiation
        client = DuoClient("api-xxxxxxxx.duosecurity.com", "ikey", "skey")

        # Basic operations
        status = client.json_api_call("GET", "/auth/v2/check")
        client.post("/admin/v1/users", params={"username": "alice"})
    """

    def __init__(
        self,
        host: str,
        ikey: str,
        skey: str | SecretStr,
        sig_version: int = DuoAPIConfig.DEFAULT_SIG_VERSION,
        timeout: int = DuoAPIConfig.DEFAULT_TIMEOUT,
        proxy: ProxyConfig | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the Duo API client.

        Args:
            host: API hostname
            ikey: Integration key
            skey: Secret key
            sig_version: Signature version, 1 or 2
            timeout: Request timeout in seconds
            proxy: Optional HTTP proxy
            session: Optional requests.Session to share
        """
        self.host = host
        self.ikey = ikey
        self._skey = skey if isinstance(skey, SecretStr) else SecretStr(skey)
        self.sig_version = sig_version
        self.timeout = timeout
        self.proxy = proxy
        self._session = session or requests.Session()
        self._transport = RetryingTransport(session=self._session)
        self._async_transport = AsyncRetryingTransport(session=self._session)

    @classmethod
    def from_credentials(
        cls,
        credentials: DuoCredentials,
        sig_version: int = DuoAPIConfig.DEFAULT_SIG_VERSION,
        timeout: int = DuoAPIConfig.DEFAULT_TIMEOUT,
    ) -> DuoClient:
        """
        Create client from DuoCredentials object.

        Args:
            credentials: DuoCredentials instance
            sig_version: Signature version, 1 or 2
            timeout: Request timeout in seconds

        Returns:
            Configured DuoClient instance
        """
        return cls(
            host=credentials.host,
            ikey=credentials.ikey,
            skey=credentials.skey,
            sig_version=sig_version,
            timeout=timeout,
        )

    @classmethod
    def from_config(cls, config: DuoClientConfig) -> DuoClient:
        """Create client from a full DuoClientConfig."""
        return cls(
            host=config.credentials.host,
            ikey=config.credentials.ikey,
            skey=config.credentials.skey,
            sig_version=config.sig_version,
            timeout=config.timeout,
            proxy=config.proxy,
        )

    def new_request(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
    ) -> DuoRequest:
        """
        Create a signed request for this client's host.

        Args:
            method: HTTP method
            path: API path (e.g. /auth/v2/check)
            params: Request parameters

        Returns:
            Signed DuoRequest sharing this client's transports
        """
        if not path.startswith("/"):
            path = "/" + path

        request = DuoRequest(
            method,
            self.host,
            path,
            timeout=self.timeout,
            transport=self._transport,
            async_transport=self._async_transport,
        )
        if params:
            request.add_params(params)
        if self.proxy is not None:
            request.set_proxy(self.proxy.host, self.proxy.port)
        request.sign(self.ikey, self._skey, sig_version=self.sig_version)
        return request

    def api_call(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
    ) -> requests.Response:
        """Make a signed request and return the raw HTTP response."""
        return self.new_request(method, path, params).execute_http_request()

    def json_api_call(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        """
        Make a signed request and return the unwrapped ``response`` field.

        Raises:
            ProtocolError: If the API reports a failure
            TransportError: If the request cannot be delivered
        """
        return self.new_request(method, path, params).execute_request()

    async def ajson_api_call(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        """Awaitable json_api_call()."""
        return await self.new_request(method, path, params).aexecute_request()

    def get(self, path: str, params: Mapping[str, str] | None = None) -> Any:
        """Make a GET request."""
        return self.json_api_call("GET", path, params)

    def post(self, path: str, params: Mapping[str, str] | None = None) -> Any:
        """Make a POST request."""
        return self.json_api_call("POST", path, params)

    def put(self, path: str, params: Mapping[str, str] | None = None) -> Any:
        """Make a PUT request."""
        return self.json_api_call("PUT", path, params)

    def delete(self, path: str, params: Mapping[str, str] | None = None) -> Any:
        """Make a DELETE request."""
        return self.json_api_call("DELETE", path, params)

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self) -> DuoClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
