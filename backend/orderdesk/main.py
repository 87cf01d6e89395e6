"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderdesk.api.routes import addresses, health
from orderdesk.config import Settings, get_settings
from orderdesk.observability.logging import LoggingMiddleware, setup_logging
from orderdesk.resilience import ResilienceConfig
from orderdesk.services.address_lookup import AddressLookupClient

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application from settings read once at startup."""
    settings = settings or get_settings()

    setup_logging(
        level=logging.DEBUG if settings.debug else logging.INFO,
        json_output=settings.log_json,
    )

    resilience_config = ResilienceConfig.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown events."""
        # Startup
        logger.info(f"Starting OrderDesk API in {settings.environment} mode")
        app.state.address_client = AddressLookupClient(
            config=resilience_config,
            base_url=settings.cep_api_url,
        )
        logger.info(
            "Address lookup: %s (timeouts %ss/%ss, %d attempts)",
            settings.cep_api_url,
            resilience_config.connect_timeout_seconds,
            resilience_config.read_timeout_seconds,
            resilience_config.max_retries,
        )
        yield
        # Shutdown
        await app.state.address_client.aclose()
        logger.info("Shutting down OrderDesk API")

    app = FastAPI(
        title="OrderDesk API",
        description="Order desk backend with resilient CEP address lookup",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # CORS Configuration - Restrict in production
    cors_origins = ["*"] if not settings.is_production else [settings.frontend_url]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True if settings.is_production else False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(addresses.router, prefix="/api/v1/enderecos", tags=["Endereços"])

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "OrderDesk API",
            "version": "1.0.0",
            "status": "running",
            "environment": settings.environment,
            "docs": "/docs" if settings.debug else "disabled",
            "endpoints": {
                "health": "/health",
                "addresses": "/api/v1/enderecos/{cep}",
            },
        }

    return app


app = create_app()
