"""Observability module: structured logging and request context."""

from orderdesk.observability.logging import (
    JsonFormatter,
    LoggingMiddleware,
    RequestContextFilter,
    clear_request_context,
    get_request_id,
    set_request_context,
    setup_logging,
)

__all__ = [
    "JsonFormatter",
    "LoggingMiddleware",
    "RequestContextFilter",
    "clear_request_context",
    "get_request_id",
    "set_request_context",
    "setup_logging",
]
