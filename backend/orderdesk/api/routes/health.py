"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "orderdesk-api",
        "version": "1.0.0",
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness check reporting the external API configuration."""
    client = getattr(request.app.state, "address_client", None)
    if client is None:
        return {"status": "starting", "checks": {"address_lookup": "not_configured"}}

    config = client.fetcher.config
    return {
        "status": "ready",
        "checks": {"address_lookup": "ok"},
        "address_lookup": {
            "base_url": client.base_url,
            "connect_timeout_seconds": config.connect_timeout_seconds,
            "read_timeout_seconds": config.read_timeout_seconds,
            "max_retries": config.max_retries,
        },
    }


@router.get("/health/live")
async def liveness_check():
    """Liveness check - always returns ok if the server is running."""
    return {"status": "alive"}
