"""
FastAPI application factory for a tracechain tier.

Example:
    Build and serve the tier selected by the environment:

        >>> from tracechain.app import create_app
        >>> from tracechain.config import ServiceConfig
        >>> app = create_app(ServiceConfig.from_env())

    Or use the command line entry point:

        $ SERVICE_NAME=service-b tracechain

Endpoints:
    GET /health - Health check endpoint
    GET /api/users - Tier A, calls tier B
    GET /api/profiles - Tier B, calls tier C
    GET /api/settings - Tier C
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import httpx
from fastapi import FastAPI
from opentelemetry import trace

from tracechain.config import SERVICE_VERSION, ServiceConfig
from tracechain.core.outcome import RandomSource
from tracechain.integrations import setup_fastapi_tracing, shutdown_tracing
from tracechain.routes import build_router
from tracechain.schemas import HealthResponse

logger = logging.getLogger(__name__)

APP_NAME = "tracechain"
APP_DESCRIPTION = "Three-tier call chain demo with distributed tracing"


def create_app(
    config: ServiceConfig,
    tracer_provider: Optional[trace.TracerProvider] = None,
    rng: Optional[RandomSource] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    instrument: bool = False,
) -> FastAPI:
    """Create the FastAPI application for one tier process.

    Args:
        config: Resolved service configuration
        tracer_provider: Provider for tier spans (global if None)
        rng: Random source for latency and outcome draws
        http_client: Client for downstream calls. When omitted, one without
            timeouts is created at startup and closed at shutdown.
        instrument: Enable FastAPI server-span auto-instrumentation

    Returns:
        The configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Own the downstream HTTP client for the lifetime of the app."""
        logger.info(
            "Application starting: %s v%s (role=%s)",
            APP_NAME,
            SERVICE_VERSION,
            config.role,
        )
        owns_client = http_client is None
        app.state.http_client = http_client or httpx.AsyncClient(timeout=None)

        yield  # Application runs here

        logger.info("%s shutting down gracefully", config.role)
        if owns_client:
            await app.state.http_client.aclose()
        shutdown_tracing()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    if http_client is not None:
        app.state.http_client = http_client
    app.include_router(build_router(config, tracer_provider=tracer_provider, rng=rng))

    @app.get("/health", tags=["monitoring"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Always reports healthy, independent of any simulated outcome.

        Returns:
            Health status model
        """
        return HealthResponse(
            status="healthy",
            service=config.service_name,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    if instrument:
        setup_fastapi_tracing(app, tracer_provider=tracer_provider)

    return app
