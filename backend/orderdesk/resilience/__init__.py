"""Resilience module for external API calls."""

from orderdesk.resilience.fallback import (
    FetchResult,
    ResponseHandler,
    ResponseHandlerError,
    ensure_response_handler,
)
from orderdesk.resilience.fetcher import ResilientFetcher
from orderdesk.resilience.retry import (
    ExponentialBackoff,
    ResilienceConfig,
    RetryState,
    TRANSIENT_ERRORS,
    is_transient,
)

__all__ = [
    "FetchResult",
    "ResponseHandler",
    "ResponseHandlerError",
    "ensure_response_handler",
    "ResilientFetcher",
    "ExponentialBackoff",
    "ResilienceConfig",
    "RetryState",
    "TRANSIENT_ERRORS",
    "is_transient",
]
