"""
Route definitions for the tier endpoints.

Every process registers all three tier routes regardless of its role; the
role only decides which port the process listens on.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from opentelemetry import trace

from tracechain.config import ServiceConfig
from tracechain.core.handler import INSTRUMENTATION_NAME, TierHandler
from tracechain.core.outcome import RandomSource
from tracechain.core.tiers import TIER_PROFILES, TierProfile
from tracechain.schemas import SUCCESS_MODELS, error_responses

# Configure module logger
logger = logging.getLogger(__name__)


def _endpoint(handler: TierHandler):
    """Wrap a handler in a plain coroutine function for FastAPI."""
    async def endpoint(request: Request) -> JSONResponse:
        return await handler(request)

    endpoint.__name__ = handler.profile.operation
    endpoint.__doc__ = f"GET {handler.profile.route} ({handler.profile.role})."
    return endpoint


def build_router(
    config: ServiceConfig,
    tracer_provider: Optional[trace.TracerProvider] = None,
    rng: Optional[RandomSource] = None,
    profiles: Optional[Iterable[TierProfile]] = None,
) -> APIRouter:
    """Create the router holding one GET route per tier.

    Args:
        config: Service configuration passed to every handler
        tracer_provider: Provider for tier spans (global if None)
        rng: Random source shared by the handlers
        profiles: Tier profiles to register (all three by default)

    Returns:
        APIRouter with the tier routes
    """
    tracer = trace.get_tracer(INSTRUMENTATION_NAME, tracer_provider=tracer_provider)
    router = APIRouter(tags=["tiers"])

    for profile in profiles or TIER_PROFILES.values():
        handler = TierHandler(profile, config, tracer, rng=rng)
        error_codes = (400, 500, 503) if profile.downstream else (400, 500)
        router.add_api_route(
            profile.route,
            _endpoint(handler),
            methods=["GET"],
            name=profile.operation,
            responses={
                200: {"model": SUCCESS_MODELS[profile.route]},
                **error_responses(*error_codes),
            },
        )
        logger.debug("Registered %s -> %s", profile.route, profile.operation)

    return router
