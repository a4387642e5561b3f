"""
HMAC-SHA1 request signing for Duo API authentication.

The Duo API authenticates each request with a signature over a canonical
request string:

    [DATE "\\n"]  (signature version 2 only)
    METHOD "\\n"
    host (lowercase) "\\n"
    path "\\n"
    canonical query string

The Authorization header format is:
    Basic base64(ikey:hex(hmac-sha1(skey, canonical_string)))

Version 2 signatures also send the signed date in the Date header.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import TYPE_CHECKING

from pydantic import SecretStr

from duo_http.auth.encoding import canonical_query_string
from duo_http.constants import DuoAPIConfig, Headers
from duo_http.core.exceptions import SigningError

if TYPE_CHECKING:
    from duo_http.api.request import RequestDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthHeaders:
    """
    Container for Duo authentication headers.

    Attributes:
        authorization: The Authorization header value
        date: The Date header value (None for signature version 1)
    """

    authorization: str
    date: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Convert to header dictionary for requests."""
        headers = {Headers.AUTHORIZATION: self.authorization}
        if self.date is not None:
            headers[Headers.DATE] = self.date
        return headers


def format_rfc2822_date(moment: datetime | None = None) -> str:
    """
    Format a timestamp the way the verifier expects in the Date header.

    Day and month names are always English, independent of the process
    locale. Naive datetimes are treated as UTC.

    Args:
        moment: Time to format (current time if not provided)

    Returns:
        Date such as ``Tue, 14 Nov 2023 22:13:20 +0000``
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment)


def build_canonical_request(
    date: str,
    sig_version: int,
    method: str,
    host: str,
    path: str,
    query: str,
) -> str:
    """
    Build the exact string that is signed.

    Args:
        date: Formatted request date (ignored for version 1)
        sig_version: Signature version, 1 or 2
        method: HTTP method
        host: API hostname
        path: Request path, used verbatim
        query: Canonical query string

    Returns:
        Newline-joined canonical request, without a trailing newline
    """
    lines = [method.upper(), host.lower(), path, query]
    if sig_version == 2:
        lines.insert(0, date)
    return "\n".join(lines)


def sign_hmac(skey: str | SecretStr | bytes, message: str) -> str:
    """
    Compute the hex-encoded HMAC-SHA1 of a canonical request.

    Args:
        skey: Secret key
        message: Canonical request string

    Returns:
        Lowercase hexadecimal digest

    Raises:
        SigningError: If the key or message cannot be used to compute a digest
    """
    if isinstance(skey, SecretStr):
        skey = skey.get_secret_value()

    try:
        key = skey if isinstance(skey, bytes) else skey.encode("utf-8")
        return hmac.new(key, message.encode("utf-8"), hashlib.sha1).hexdigest()
    except (AttributeError, TypeError, ValueError) as e:
        # The key itself must never appear in the error.
        raise SigningError(f"Failed to compute request signature: {type(e).__name__}") from e


def generate_auth_headers(
    ikey: str,
    skey: str | SecretStr | bytes,
    method: str,
    host: str,
    path: str,
    params: Mapping[str, str] | None = None,
    sig_version: int = DuoAPIConfig.DEFAULT_SIG_VERSION,
    date: str | None = None,
) -> AuthHeaders:
    """
    Generate Duo authentication headers for a request.

    Args:
        ikey: Integration key
        skey: Secret key
        method: HTTP method
        host: API hostname
        path: Request path
        params: Request parameters
        sig_version: Signature version, 1 or 2
        date: Optional preformatted date (uses current time if not provided)

    Returns:
        AuthHeaders with the Authorization header, and Date for version 2

    Raises:
        SigningError: For an unknown signature version or digest failure
        EncodingError: If a parameter cannot be encoded

    Example:
        >>> headers = generate_auth_headers(
        ...     ikey="DIXXXXXXXXXXXXXXXXXX",
        ...     skey="secret",
        ...     method="GET",
        ...     host="api-xxxxxxxx.duosecurity.com",
        ...     path="/auth/v2/check",
        ... )
        >>> requests.get(url, headers=headers.to_dict())
    """
    if sig_version not in DuoAPIConfig.SIG_VERSIONS:
        raise SigningError(
            f"Unsupported signature version: {sig_version}",
            context={"sig_version": sig_version},
        )

    if date is None:
        date = format_rfc2822_date()

    canon = build_canonical_request(
        date=date,
        sig_version=sig_version,
        method=method,
        host=host,
        path=path,
        query=canonical_query_string(params or {}),
    )
    signature = sign_hmac(skey, canon)

    auth = f"{ikey}:{signature}"
    authorization = "Basic " + base64.b64encode(auth.encode("utf-8")).decode("ascii")

    return AuthHeaders(
        authorization=authorization,
        date=date if sig_version == 2 else None,
    )


def sign_request(
    request: RequestDescriptor,
    ikey: str,
    skey: str | SecretStr | bytes,
    sig_version: int = DuoAPIConfig.DEFAULT_SIG_VERSION,
    date: str | None = None,
) -> RequestDescriptor:
    """
    Return a copy of the request carrying its authentication headers.

    Args:
        request: Request to sign
        ikey: Integration key
        skey: Secret key
        sig_version: Signature version, 1 or 2
        date: Optional preformatted date (uses current time if not provided)

    Returns:
        New RequestDescriptor with Authorization (and, for v2, Date) headers
    """
    auth = generate_auth_headers(
        ikey=ikey,
        skey=skey,
        method=request.method,
        host=request.host,
        path=request.path,
        params=request.params,
        sig_version=sig_version,
        date=date,
    )
    logger.debug(f"Signed {request.method} {request.path} (sig_version={sig_version})")

    # Authorization and Date are owned by the signature; replace, never append
    signed = request.without_headers(Headers.AUTHORIZATION, Headers.DATE)
    for name, value in auth.to_dict().items():
        signed = signed.with_header(name, value)
    return signed
