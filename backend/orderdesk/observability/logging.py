"""Structured logging with request context propagation."""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional


# Context variable for log correlation
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "request_id"}

_HANDLER_NAME = "orderdesk"


def set_request_context(request_id: Optional[str] = None):
    """Set logging context for current request."""
    if request_id:
        _request_id.set(request_id)


def clear_request_context():
    """Clear logging context."""
    _request_id.set(None)


def get_request_id() -> Optional[str]:
    """Get the request id bound to the current context."""
    return _request_id.get()


class RequestContextFilter(logging.Filter):
    """Stamp the current request id onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()
        return True


class JsonFormatter(logging.Formatter):
    """
    Render log records as single-line JSON.

    Fields passed through ``extra=`` are merged into the top-level object,
    and exception info is nested under ``error``.
    """

    def format(self, record: logging.LogRecord) -> str:
        result: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "timestamp": record.created,
            "logger": record.name,
        }

        request_id = getattr(record, "request_id", None)
        if request_id:
            result["request_id"] = request_id

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                result[key] = value

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            result["error"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value),
                "stack_trace": self.formatException(record.exc_info),
            }

        return json.dumps(result, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable format with the request id prefix."""

    def __init__(self):
        super().__init__("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        output = super().format(record)
        request_id = getattr(record, "request_id", None)
        if request_id:
            output = f"[req={request_id}] {output}"
        return output


def setup_logging(level: int = logging.INFO, json_output: bool = False) -> logging.Logger:
    """
    Setup application logging.

    Args:
        level: Minimum log level
        json_output: Use JSON format

    Returns:
        Configured root logger
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_output else TextFormatter())
    handler.addFilter(RequestContextFilter())
    handler.set_name(_HANDLER_NAME)

    # Replace only our own handler so repeated setup does not duplicate output
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    return root


class LoggingMiddleware:
    """
    Middleware for automatic request logging.

    Logs request start/end with timing and context.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())[:8]
        set_request_context(request_id=request_id)

        logger = logging.getLogger("orderdesk.requests")
        start_time = time.time()

        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "/")

        logger.info(
            "Request started: %s %s",
            method,
            path,
            extra={"method": method, "path": path},
        )

        response_status = 0

        async def send_wrapper(message):
            nonlocal response_status
            if message["type"] == "http.response.start":
                response_status = message.get("status", 0)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)

        except Exception:
            logger.exception(
                "Request failed: %s %s",
                method,
                path,
                extra={"method": method, "path": path},
            )
            raise

        finally:
            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Request completed: %s %s %d",
                method,
                path,
                response_status,
                extra={
                    "method": method,
                    "path": path,
                    "status": response_status,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            clear_request_context()
