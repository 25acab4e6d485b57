"""
FastAPI and client-library auto-instrumentation.

The tier handlers create their own spans; the instrumentations here add the
server span around each request, a client span around each downstream call
and trace fields on log records.

Example:
    >>> from fastapi import FastAPI
    >>> from tracechain.integrations import setup_fastapi_tracing
    >>>
    >>> app = FastAPI()
    >>> setup_fastapi_tracing(app, excluded_urls="health")
"""

from __future__ import annotations

import logging
from typing import Optional

from opentelemetry import trace

logger = logging.getLogger(__name__)


def setup_fastapi_tracing(
    app,  # FastAPI app - type hint omitted to avoid import
    tracer_provider: Optional[trace.TracerProvider] = None,
    excluded_urls: Optional[str] = "health",
) -> bool:
    """Enable OpenTelemetry auto-instrumentation on a FastAPI application.

    Args:
        app: The FastAPI application instance.
        tracer_provider: Provider to record server spans with (global if None).
        excluded_urls: Comma separated URL patterns to exclude from tracing.

    Returns:
        True if instrumentation was applied.
    """
    try:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    except ImportError:
        logger.warning(
            "opentelemetry-instrumentation-fastapi not installed. "
            "Install with: pip install opentelemetry-instrumentation-fastapi"
        )
        return False

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=tracer_provider,
        excluded_urls=excluded_urls,
    )
    logger.info("FastAPI auto-instrumentation enabled")
    return True


def instrument_logging() -> bool:
    """Instrument Python logging to include trace context on every record.

    Returns:
        True if instrumentation was applied.
    """
    try:
        from opentelemetry.instrumentation.logging import LoggingInstrumentor
        LoggingInstrumentor().instrument()
        logger.info("Logging instrumentation enabled")
        return True
    except ImportError:
        logger.warning(
            "opentelemetry-instrumentation-logging not installed. "
            "Install with: pip install opentelemetry-instrumentation-logging"
        )
        return False


def instrument_httpx() -> bool:
    """Instrument outgoing HTTP requests made with the httpx library.

    Downstream tier calls then get a client span of their own.

    Returns:
        True if instrumentation was applied.
    """
    try:
        from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
        HTTPXClientInstrumentor().instrument()
        logger.info("HTTPX library instrumentation enabled")
        return True
    except ImportError:
        logger.warning(
            "opentelemetry-instrumentation-httpx not installed. "
            "Install with: pip install opentelemetry-instrumentation-httpx"
        )
        return False


def instrument_all() -> dict[str, bool]:
    """Instrument all client libraries used by the tiers.

    Returns:
        Dict mapping library name to whether instrumentation succeeded.

    Example:
        >>> results = instrument_all()
        >>> print(results)
        {'httpx': True, 'logging': True}
    """
    results = {
        "httpx": instrument_httpx(),
        "logging": instrument_logging(),
    }

    enabled = [k for k, v in results.items() if v]
    logger.info("Auto-instrumentation complete: %s", ", ".join(enabled) or "none")

    return results
