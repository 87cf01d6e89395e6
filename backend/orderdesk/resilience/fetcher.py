"""Resilient HTTP GET with bounded retries and fallback."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import httpx

from orderdesk.resilience.fallback import (
    FetchResult,
    ResponseHandler,
    ensure_response_handler,
)
from orderdesk.resilience.retry import (
    ExponentialBackoff,
    ResilienceConfig,
    RetryState,
    is_transient,
)

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class ResilientFetcher:
    """
    Issue GET requests that never raise on upstream failure.

    Transient transport errors (timeouts, refused or reset connections) are
    retried with exponential backoff until ``config.max_retries`` attempts
    have been made. Other request errors, such as a body that cannot be
    decoded, fall back at once. Any HTTP response, including 4xx/5xx, ends
    the loop and goes to the handler's ``parse_response``. When the
    attempts run out the handler's fallback payload is returned as an
    unsuccessful FetchResult.

    Usage:
        async with ResilientFetcher(handler, ResilienceConfig()) as fetcher:
            result = await fetcher.fetch_with_resilience(url)
    """

    def __init__(
        self,
        handler: ResponseHandler,
        config: Optional[ResilienceConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        backoff: Optional[ExponentialBackoff] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        self.handler = ensure_response_handler(handler)
        self.config = config or ResilienceConfig()
        self.backoff = backoff or ExponentialBackoff()
        self._sleep = sleep or asyncio.sleep

        # Injected clients belong to the caller
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self.config.to_timeout(),
        )

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def fetch_with_resilience(self, url: str) -> FetchResult:
        """
        Fetch a URL, retrying transient failures.

        Args:
            url: Absolute URL to GET

        Returns:
            The handler's interpretation of the response, or the fallback
            result once retries are exhausted
        """
        state = RetryState()

        while True:
            try:
                response = await self._client.get(
                    url, timeout=self.config.to_timeout()
                )
            except httpx.RequestError as e:
                state.record_failure(e)

                if not is_transient(e):
                    self._log_failure(e, url, state.attempt_number)
                    return FetchResult.fallback(self.handler)

                if not state.can_retry(self.config.max_retries):
                    self._log_failure(e, url, state.attempt_number)
                    return FetchResult.fallback(self.handler)

                await self._sleep(self.backoff.get_delay(state.attempt_number))
                state.advance()
                continue

            return self._interpret(response, url)

    def _interpret(self, response: httpx.Response, url: str) -> FetchResult:
        """Hand a received response to the handler."""
        try:
            return self.handler.parse_response(response)
        except NotImplementedError:
            raise
        except Exception:
            logger.exception(
                "Could not interpret response from %s (status %d)",
                url,
                response.status_code,
            )
            return FetchResult.fallback(self.handler)

    def _log_failure(self, error: Exception, url: str, attempt: int):
        logger.error(
            "External API call failed after %d attempts: %s - %s (url: %s)",
            attempt,
            type(error).__name__,
            error,
            url,
            extra={
                "url": url,
                "attempts": attempt,
                "error_type": type(error).__name__,
                "error_message": str(error),
            },
        )

    async def aclose(self):
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ResilientFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
