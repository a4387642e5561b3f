"""
Pytest fixtures for API client tests.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from duo_http.api.client import DuoClient
from duo_http.api.transport import AsyncRetryingTransport, RetryingTransport
from duo_http.core.config import DuoCredentials


@pytest.fixture
def credentials() -> DuoCredentials:
    """Create test credentials."""
    return DuoCredentials(
        host="api-test.duosecurity.com",
        ikey="DITESTIKEY0000000000",
        skey=SecretStr("test_secret_key"),
    )


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock requests.Session."""
    return MagicMock()


@pytest.fixture
def sleeps() -> list[float]:
    """Collects backoff delays instead of sleeping."""
    return []


@pytest.fixture
def transport(mock_session: MagicMock, sleeps: list[float]) -> RetryingTransport:
    """Blocking transport that records its backoff delays."""
    return RetryingTransport(session=mock_session, sleep=sleeps.append)


@pytest.fixture
def async_transport(mock_session: MagicMock, sleeps: list[float]) -> AsyncRetryingTransport:
    """Awaitable transport that records its backoff delays."""

    async def record(delay: float) -> None:
        sleeps.append(delay)

    return AsyncRetryingTransport(session=mock_session, sleep=record)


@pytest.fixture
def client(credentials: DuoCredentials, mock_session: MagicMock) -> DuoClient:
    """Create a DuoClient with mocked session and no real backoff."""
    client = DuoClient.from_credentials(credentials)
    client._session = mock_session
    client._transport = RetryingTransport(session=mock_session, sleep=lambda _: None)
    client._async_transport = AsyncRetryingTransport(session=mock_session, sleep=_no_sleep)
    return client


async def _no_sleep(_: float) -> None:
    return None


def _make_response(
    status_code: int = 200,
    json_data: Any = None,
    text: str = "",
    headers: dict[str, str] | None = None,
) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text or (json.dumps(json_data) if json_data is not None else "")
    response.headers = headers or {}
    return response


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for mock requests.Response objects."""
    return _make_response
