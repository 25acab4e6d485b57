"""
OpenTelemetry tracing setup with the OTLP exporter.

This module configures the global TracerProvider that ships every finished
span of a tier to an OTLP collector, optionally echoing spans to stdout.

Example:
    >>> from tracechain.integrations import setup_tracing, get_tracer
    >>>
    >>> # Setup tracing
    >>> setup_tracing(
    ...     service_name="tracechain",
    ...     otlp_endpoint="http://localhost:4317",
    ... )
    >>>
    >>> # Get a tracer and create spans
    >>> tracer = get_tracer("tracechain")
    >>> with tracer.start_as_current_span("get_users") as span:
    ...     span.set_attribute("http.route", "/api/users")
"""

from __future__ import annotations

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SimpleSpanProcessor,
    SpanExporter,
    ConsoleSpanExporter,
)

logger = logging.getLogger(__name__)

# Global reference to the configured provider
_tracer_provider: Optional[TracerProvider] = None


def build_tracer_provider(
    service_name: str,
    service_version: str = "1.0.0",
    otlp_endpoint: Optional[str] = None,
    console_output: bool = False,
    use_batch_processor: bool = True,
    additional_exporters: Optional[list[SpanExporter]] = None,
) -> TracerProvider:
    """Build a TracerProvider without installing it globally.

    Args:
        service_name: ``service.name`` resource attribute.
        service_version: ``service.version`` resource attribute.
        otlp_endpoint: OTLP gRPC collector endpoint. None disables OTLP export.
        console_output: Whether to also print finished spans to stdout.
        use_batch_processor: Use BatchSpanProcessor (True) or SimpleSpanProcessor.
        additional_exporters: Additional SpanExporters to attach.

    Returns:
        The configured TracerProvider.
    """
    resource = Resource.create({
        SERVICE_NAME: service_name,
        SERVICE_VERSION: service_version,
    })
    provider = TracerProvider(resource=resource)

    exporters: list[SpanExporter] = []
    if otlp_endpoint:
        insecure = otlp_endpoint.startswith("http://")
        exporters.append(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=insecure))
    if console_output:
        exporters.append(ConsoleSpanExporter())
    exporters.extend(additional_exporters or [])

    for exporter in exporters:
        if use_batch_processor:
            provider.add_span_processor(BatchSpanProcessor(exporter))
        else:
            provider.add_span_processor(SimpleSpanProcessor(exporter))

    return provider


def setup_tracing(
    service_name: str,
    service_version: str = "1.0.0",
    otlp_endpoint: Optional[str] = None,
    console_output: bool = False,
    use_batch_processor: bool = True,
    additional_exporters: Optional[list[SpanExporter]] = None,
) -> TracerProvider:
    """Setup OpenTelemetry tracing and install the provider globally.

    Args:
        service_name: ``service.name`` resource attribute.
        service_version: ``service.version`` resource attribute.
        otlp_endpoint: OTLP gRPC collector endpoint. None disables OTLP export.
        console_output: Whether to also print finished spans to stdout.
        use_batch_processor: Use BatchSpanProcessor (True) or SimpleSpanProcessor.
        additional_exporters: Additional SpanExporters to use alongside OTLP.

    Returns:
        The configured TracerProvider.

    Example:
        >>> provider = setup_tracing(
        ...     service_name="tracechain",
        ...     otlp_endpoint="http://otel-collector:4317",
        ... )
    """
    global _tracer_provider

    provider = build_tracer_provider(
        service_name=service_name,
        service_version=service_version,
        otlp_endpoint=otlp_endpoint,
        console_output=console_output,
        use_batch_processor=use_batch_processor,
        additional_exporters=additional_exporters,
    )

    # Set as global provider
    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    logger.info(
        "Tracing configured: service=%s, otlp_endpoint=%s, console=%s",
        service_name,
        otlp_endpoint,
        console_output,
    )

    return provider


def get_tracer(
    name: str,
    version: Optional[str] = None,
    tracer_provider: Optional[trace.TracerProvider] = None,
) -> trace.Tracer:
    """Get a tracer instance.

    Args:
        name: Name of the tracer (the instrumentation scope).
        version: Optional version of the tracer.
        tracer_provider: Provider to use instead of the global one.

    Returns:
        A Tracer instance for creating spans.
    """
    provider = tracer_provider or trace.get_tracer_provider()
    return provider.get_tracer(name, version)


def shutdown_tracing() -> None:
    """Shutdown the tracing system.

    Flushes all pending spans and shuts down the TracerProvider.
    Call this on application shutdown to ensure all spans are exported.
    """
    global _tracer_provider

    if _tracer_provider:
        logger.info("Shutting down tracing...")
        _tracer_provider.shutdown()
        _tracer_provider = None
        logger.info("Tracing shutdown complete")
