"""
HTTP delivery with retry on rate limiting.

Only HTTP 429 responses are retried. Each retry waits

    min(BACKOFF_FACTOR ** (attempt - 1) * 1000 + jitter, MAX_BACKOFF_MS)

milliseconds, where jitter is a random 0-999 ms, for at most
MAX_REQUEST_ATTEMPTS attempts in total. When attempts run out the last 429
response is returned as-is; callers inspect the status themselves.

Connection and timeout failures are raised immediately and never retried.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Awaitable, Callable

import requests

from duo_http.api.request import PreparedCall
from duo_http.constants import DuoAPIConfig
from duo_http.core.exceptions import APIConnectionError, APITimeoutError, TransportError

logger = logging.getLogger(__name__)


def compute_backoff_ms(attempt: int, jitter_ms: int) -> int:
    """
    Delay before retrying after the given attempt was rate limited.

    Args:
        attempt: Number of the attempt that just returned 429 (1-based)
        jitter_ms: Random extra delay in milliseconds

    Returns:
        Delay in milliseconds, capped at MAX_BACKOFF_MS
    """
    base = DuoAPIConfig.BACKOFF_FACTOR ** (attempt - 1) * DuoAPIConfig.BASE_BACKOFF_MS
    return min(base + jitter_ms, DuoAPIConfig.MAX_BACKOFF_MS)


class _RetryPolicy:
    """Shared session handling and backoff computation."""

    def __init__(
        self,
        session: requests.Session | None = None,
        max_attempts: int = DuoAPIConfig.MAX_REQUEST_ATTEMPTS,
        rng: random.Random | None = None,
    ):
        self._session = session or requests.Session()
        self.max_attempts = max_attempts
        self._rng = rng or random.Random()

    @property
    def session(self) -> requests.Session:
        return self._session

    def _backoff_ms(self, attempt: int) -> int:
        return compute_backoff_ms(attempt, self._rng.randrange(DuoAPIConfig.MAX_JITTER_MS))

    def _send(self, call: PreparedCall) -> requests.Response:
        """Issue one attempt, translating requests failures into TransportError."""
        try:
            return self._session.request(**call.request_kwargs())
        except requests.exceptions.Timeout as e:
            raise APITimeoutError(f"Request timed out: {e}")
        except requests.exceptions.ConnectionError as e:
            raise APIConnectionError(f"Connection failed: {e}")
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}")

    @staticmethod
    def _is_rate_limited(response: requests.Response) -> bool:
        return response.status_code == DuoAPIConfig.RATE_LIMITED_STATUS

    def _log_exhausted(self, call: PreparedCall, attempts: int) -> None:
        logger.warning(
            f"{call.method} {call.url.split('?', 1)[0]} still rate limited after {attempts} attempts"
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()


class RetryingTransport(_RetryPolicy):
    """
    Blocking transport that retries rate-limited requests.

    The backoff sleep only blocks the calling thread. Retry state is local
    to each execute() call, so one transport can serve many threads.

    Usage:
        transport = RetryingTransport()
        response = transport.execute(prepare_request(signed_request))
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        max_attempts: int = DuoAPIConfig.MAX_REQUEST_ATTEMPTS,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(session=session, max_attempts=max_attempts, rng=rng)
        self._sleep = sleep

    def execute(self, call: PreparedCall) -> requests.Response:
        """
        Send a prepared call, retrying while the API answers 429.

        Args:
            call: Prepared HTTP call (sent identically on every attempt)

        Returns:
            The first non-429 response, or the last 429 response once
            attempts are exhausted

        Raises:
            APIConnectionError: If the connection cannot be established
            APITimeoutError: If the request times out
            TransportError: For any other transport failure
        """
        response = self._send(call)
        attempt = 1
        while attempt < self.max_attempts and self._is_rate_limited(response):
            delay_ms = self._backoff_ms(attempt)
            logger.debug(f"Rate limited on attempt {attempt}, retrying in {delay_ms} ms")
            self._sleep(delay_ms / 1000)
            response = self._send(call)
            attempt += 1

        if self._is_rate_limited(response):
            self._log_exhausted(call, attempt)
        return response


class AsyncRetryingTransport(_RetryPolicy):
    """
    Awaitable transport that retries rate-limited requests.

    Each attempt runs the blocking requests call in a worker thread and the
    backoff is an awaited sleep, so the event loop keeps serving other tasks.
    Cancelling the task (or wrapping it in asyncio.wait_for) stops the retry
    sequence at the next await.

    Usage:
        transport = AsyncRetryingTransport()
        response = await transport.execute(prepare_request(signed_request))
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        max_attempts: int = DuoAPIConfig.MAX_REQUEST_ATTEMPTS,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        super().__init__(session=session, max_attempts=max_attempts, rng=rng)
        self._sleep = sleep

    async def execute(self, call: PreparedCall) -> requests.Response:
        """
        Send a prepared call, retrying while the API answers 429.

        Same contract as RetryingTransport.execute().
        """
        response = await asyncio.to_thread(self._send, call)
        attempt = 1
        while attempt < self.max_attempts and self._is_rate_limited(response):
            delay_ms = self._backoff_ms(attempt)
            logger.debug(f"Rate limited on attempt {attempt}, retrying in {delay_ms} ms")
            await self._sleep(delay_ms / 1000)
            response = await asyncio.to_thread(self._send, call)
            attempt += 1

        if self._is_rate_limited(response):
            self._log_exhausted(call, attempt)
        return response
