"""
tracechain.integrations - OpenTelemetry bootstrap and auto-instrumentation.

Example:
    >>> from fastapi import FastAPI
    >>> from tracechain.integrations import setup_tracing, setup_fastapi_tracing
    >>>
    >>> provider = setup_tracing("tracechain", otlp_endpoint="http://localhost:4317")
    >>> app = FastAPI()
    >>> setup_fastapi_tracing(app, tracer_provider=provider)
"""

from tracechain.integrations.fastapi_integration import (
    setup_fastapi_tracing,
    instrument_httpx,
    instrument_logging,
    instrument_all,
)
from tracechain.integrations.setup import (
    build_tracer_provider,
    setup_tracing,
    get_tracer,
    shutdown_tracing,
)

__all__ = [
    # Setup
    "build_tracer_provider",
    "setup_fastapi_tracing",
    "setup_tracing",
    "get_tracer",
    "shutdown_tracing",
    # Individual instrumentation
    "instrument_httpx",
    "instrument_logging",
    # Convenience
    "instrument_all",
]
