"""
Immutable request descriptors and their translation into HTTP calls.

A RequestDescriptor holds everything the signature covers (method, host,
path, params) plus the delivery options (headers, timeout, proxy). Every
``with_*`` method returns a new descriptor, so a signed descriptor can never
be changed underneath its signature.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from duo_http.auth.encoding import canonical_query_string
from duo_http.constants import DuoAPIConfig, Headers, HTTPMethods
from duo_http.core.config import ProxyConfig
from duo_http.core.exceptions import UnsupportedMethodError


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Description of a single Duo API request.

    Attributes:
        method: HTTP method, stored upper-cased
        host: API hostname
        path: Request path (e.g. /auth/v2/check), used verbatim
        params: Request parameters, names unique
        headers: Ordered (name, value) pairs; duplicates allowed
        timeout: Connect/read timeout in seconds
        proxy: Optional HTTP proxy
    """

    method: str
    host: str
    path: str
    params: Mapping[str, str] = field(default_factory=dict)
    headers: tuple[tuple[str, str], ...] = ()
    timeout: int = DuoAPIConfig.DEFAULT_TIMEOUT
    proxy: ProxyConfig | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "headers", tuple(self.headers))

    def with_param(self, name: str, value: str) -> RequestDescriptor:
        """Return a copy with one parameter added or replaced."""
        return replace(self, params={**self.params, name: value})

    def with_params(self, params: Mapping[str, str]) -> RequestDescriptor:
        """Return a copy with several parameters added or replaced."""
        return replace(self, params={**self.params, **params})

    def with_header(self, name: str, value: str) -> RequestDescriptor:
        """Return a copy with a header appended."""
        return replace(self, headers=(*self.headers, (name, value)))

    def without_headers(self, *names: str) -> RequestDescriptor:
        """Return a copy with every header of the given names removed (case-insensitive)."""
        dropped = {name.lower() for name in names}
        return replace(self, headers=tuple(pair for pair in self.headers if pair[0].lower() not in dropped))

    def with_proxy(self, host: str, port: int) -> RequestDescriptor:
        """Return a copy sent through an HTTP proxy."""
        return replace(self, proxy=ProxyConfig(host=host, port=port))

    def with_timeout(self, timeout: int) -> RequestDescriptor:
        """Return a copy with a different timeout."""
        return replace(self, timeout=timeout)

    def header_dict(self) -> dict[str, str]:
        """
        Collapse the header pairs into a mapping for the transport.

        Repeated header names are combined into one comma-separated value,
        keeping the order in which they were added.
        """
        merged: dict[str, str] = {}
        canonical_names: dict[str, str] = {}
        for name, value in self.headers:
            key = canonical_names.setdefault(name.lower(), name)
            if key in merged:
                merged[key] = f"{merged[key]}, {value}"
            else:
                merged[key] = value
        return merged


@dataclass(frozen=True)
class PreparedCall:
    """
    A fully built HTTP call, ready to hand to the transport.

    The same PreparedCall is sent on every retry attempt, so each attempt
    carries identical bytes.
    """

    method: str
    url: str
    headers: Mapping[str, str]
    body: str | None = None
    timeout: int = DuoAPIConfig.DEFAULT_TIMEOUT
    proxies: Mapping[str, str] | None = None

    def request_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for requests.Session.request."""
        return {
            "method": self.method,
            "url": self.url,
            "headers": dict(self.headers),
            "data": self.body,
            "timeout": self.timeout,
            "proxies": dict(self.proxies) if self.proxies else None,
        }


def prepare_request(request: RequestDescriptor) -> PreparedCall:
    """
    Build the outgoing HTTP call for a request descriptor.

    GET and DELETE carry the encoded parameters in the URL query string
    (only when there are any) and send no body. POST and PUT send the
    encoded parameters as a form-encoded body.

    Args:
        request: Request descriptor (normally already signed)

    Returns:
        PreparedCall for the transport

    Raises:
        UnsupportedMethodError: For any method other than GET, POST, PUT, DELETE
        EncodingError: If a parameter cannot be encoded
    """
    if request.method not in HTTPMethods.SUPPORTED:
        raise UnsupportedMethodError(request.method)

    url = f"{DuoAPIConfig.SCHEME}://{request.host}{request.path}"
    query = canonical_query_string(request.params)
    headers = request.header_dict()
    body: str | None = None

    if request.method in HTTPMethods.QUERY_METHODS:
        if query:
            url = f"{url}?{query}"
    else:
        body = query
        if not any(name.lower() == Headers.CONTENT_TYPE.lower() for name in headers):
            headers[Headers.CONTENT_TYPE] = Headers.FORM_ENCODED

    return PreparedCall(
        method=request.method,
        url=url,
        headers=headers,
        body=body,
        timeout=request.timeout,
        proxies=request.proxy.to_proxies() if request.proxy else None,
    )
