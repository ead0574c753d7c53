"""
MTG Price Finder — Resilient Fetcher

GET-and-decode-JSON with a bounded number of attempts and exponential
backoff between them. Delay before retry N is base_backoff × 2^(N-1)
(1s, 2s, 4s, ... with the default base).

The final failure is returned as a typed FetchResult rather than raised, so
each caller decides whether to swallow it. Callers that prefer exceptions
use FetchResult.unwrap().
"""

from __future__ import annotations

import asyncio
from typing import Any, NamedTuple

import httpx
import structlog

from src.config import settings

logger = structlog.get_logger(__name__)


class FetchError(Exception):
    """Raised (via FetchResult.unwrap) when every attempt at a URL failed."""

    def __init__(self, url: str, attempts: int, cause: Exception | None = None):
        self.url = url
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"Request to {url} failed after {attempts} attempts: {cause}")


class FetchResult(NamedTuple):
    """Tagged success/failure value returned by ResilientFetcher.fetch_json."""

    data: Any = None
    error: FetchError | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the decoded payload, or raise the FetchError."""
        if self.error is not None:
            raise self.error
        return self.data


def backoff_delay(attempt: int, base_backoff: float) -> float:
    """Seconds to wait after failed attempt number `attempt` (1-based)."""
    return base_backoff * (2 ** (attempt - 1))


class ResilientFetcher:
    """
    Async JSON fetcher with retry and exponential backoff.

    Pass an existing httpx.AsyncClient to share a connection pool; otherwise
    one is opened and closed by the context manager.

    Usage:
        async with ResilientFetcher() as fetcher:
            result = await fetcher.fetch_json(url)
            if result.ok:
                payload = result.data
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        max_attempts: int | None = None,
        base_backoff: float | None = None,
    ):
        self._client = client
        self._owns_client = client is None
        self._max_attempts = (
            settings.FETCH_MAX_ATTEMPTS if max_attempts is None else max_attempts
        )
        self._base_backoff = (
            settings.FETCH_BASE_BACKOFF_SECONDS if base_backoff is None else base_backoff
        )

    async def __aenter__(self) -> ResilientFetcher:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
            self._owns_client = True
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _attempt(self, url: str) -> Any:
        """Single GET. Raises on transport error, non-2xx status or bad JSON."""
        assert self._client is not None, "Fetcher not initialized. Use 'async with'."

        response = await self._client.get(url)
        response.raise_for_status()
        return response.json()

    async def fetch_json(self, url: str, max_attempts: int | None = None) -> FetchResult:
        """
        Fetch url and decode its JSON body, retrying on any failure.

        Args:
            url: Absolute URL to GET.
            max_attempts: Total attempts including the first (defaults to the
                value given at construction, then FETCH_MAX_ATTEMPTS).

        Returns:
            FetchResult with data on success, or error after the last attempt.
        """
        attempts_allowed = self._max_attempts if max_attempts is None else max_attempts
        if attempts_allowed < 1:
            raise ValueError(f"max_attempts must be at least 1, got {attempts_allowed}")

        last_error: Exception | None = None

        for attempt in range(1, attempts_allowed + 1):
            try:
                data = await self._attempt(url)
                if attempt > 1:
                    logger.info("fetch_recovered", url=url, attempt=attempt)
                return FetchResult(data=data, attempts=attempt)

            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                status_code = (
                    e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
                )

                if attempt == attempts_allowed:
                    logger.error(
                        "fetch_attempts_exhausted",
                        url=url,
                        attempts=attempt,
                        status_code=status_code,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    break

                wait_time = backoff_delay(attempt, self._base_backoff)
                logger.warning(
                    "fetch_attempt_failed",
                    url=url,
                    attempt=attempt,
                    status_code=status_code,
                    error=str(e),
                    wait_seconds=wait_time,
                )
                await asyncio.sleep(wait_time)

        return FetchResult(
            error=FetchError(url, attempts_allowed, last_error),
            attempts=attempts_allowed,
        )
