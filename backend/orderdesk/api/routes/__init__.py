"""API route modules."""

from orderdesk.api.routes import addresses, health

__all__ = ["health", "addresses"]
