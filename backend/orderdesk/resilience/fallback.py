"""Fallback results and the response handler capability."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Protocol, runtime_checkable

import httpx


@dataclass(frozen=True)
class FetchResult:
    """Result of one resilient fetch."""

    succeeded: bool
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze a private copy so callers cannot mutate the result
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    @classmethod
    def fallback(cls, handler: "ResponseHandler") -> "FetchResult":
        """Build the degraded result from a handler's fallback payload."""
        return cls(succeeded=False, data=handler.fallback_response())

    def to_dict(self) -> Dict[str, Any]:
        """Convert data to a plain dictionary for JSON rendering."""
        return dict(self.data)


@runtime_checkable
class ResponseHandler(Protocol):
    """
    Interprets upstream responses for a ResilientFetcher.

    Implementations provide the degraded payload returned when the upstream
    cannot be reached, and decide whether a received response is usable.
    """

    def fallback_response(self) -> Mapping[str, Any]:
        raise NotImplementedError("Handlers must implement fallback_response")

    def parse_response(self, response: httpx.Response) -> FetchResult:
        raise NotImplementedError("Handlers must implement parse_response")


class ResponseHandlerError(TypeError):
    """Raised when a response handler is missing a required operation."""

    def __init__(self, handler: Any, missing: str):
        self.handler = handler
        self.missing = missing
        super().__init__(
            f"{type(handler).__name__} must implement {missing}()"
        )


REQUIRED_OPERATIONS = ("fallback_response", "parse_response")


def ensure_response_handler(handler: Any) -> ResponseHandler:
    """
    Check a handler provides every required operation.

    Raises:
        ResponseHandlerError: If an operation is missing or not callable
    """
    for name in REQUIRED_OPERATIONS:
        if not callable(getattr(handler, name, None)):
            raise ResponseHandlerError(handler, name)
    return handler
