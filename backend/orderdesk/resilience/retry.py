"""Retry configuration and exponential backoff for external API calls."""

from dataclasses import dataclass
from typing import Optional, Tuple, Type

import httpx


# Failures worth another attempt: the request never produced a response
TRANSIENT_ERRORS: Tuple[Type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


def is_transient(error: Exception) -> bool:
    """Check whether a transport error may succeed on retry."""
    return isinstance(error, TRANSIENT_ERRORS)


@dataclass(frozen=True)
class ResilienceConfig:
    """
    Timeouts and retry ceiling shared by every external API call.

    Built once at startup and passed to the components that need it.
    ``max_retries`` counts attempts, so 3 means one call plus two retries.
    """

    connect_timeout_seconds: int = 5
    read_timeout_seconds: int = 10
    max_retries: int = 3

    def __post_init__(self):
        if self.connect_timeout_seconds <= 0:
            raise ValueError("connect_timeout_seconds must be positive")
        if self.read_timeout_seconds <= 0:
            raise ValueError("read_timeout_seconds must be positive")
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")

    @classmethod
    def from_settings(cls, settings) -> "ResilienceConfig":
        """Create config from application settings."""
        return cls(
            connect_timeout_seconds=settings.external_api_open_timeout,
            read_timeout_seconds=settings.external_api_read_timeout,
            max_retries=settings.external_api_max_retries,
        )

    def to_timeout(self) -> httpx.Timeout:
        """Build the httpx timeout (read/write/pool share the read limit)."""
        return httpx.Timeout(
            float(self.read_timeout_seconds),
            connect=float(self.connect_timeout_seconds),
        )


class ExponentialBackoff:
    """
    Exponential backoff calculator.

    No jitter: the delay before attempt k+1 is exactly base ** k seconds.
    """

    def __init__(self, exponential_base: float = 2.0):
        self.exponential_base = exponential_base

    def get_delay(self, attempt: int) -> float:
        """
        Calculate delay after the given attempt.

        Args:
            attempt: Attempt number that just failed (1-indexed)

        Returns:
            Delay in seconds
        """
        if attempt < 1:
            raise ValueError("attempt numbers start at 1")
        return float(self.exponential_base ** attempt)


@dataclass
class RetryState:
    """Progress of a single fetch; never shared between calls."""

    attempt_number: int = 1
    last_error: Optional[Exception] = None

    def record_failure(self, error: Exception):
        """Remember the error from the current attempt."""
        self.last_error = error

    def can_retry(self, max_retries: int) -> bool:
        """Check whether another attempt fits under the ceiling."""
        return self.attempt_number < max_retries

    def advance(self):
        """Move on to the next attempt."""
        self.attempt_number += 1
