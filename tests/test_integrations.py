"""Unit tests for tracechain.integrations.

This module tests the tracer provider bootstrap and the auto-instrumentation
helpers. Global state (the tracer provider and client instrumentation) is
patched so other test modules are unaffected.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from fastapi import FastAPI
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from tracechain.integrations import setup as tracing_setup_module
from tracechain.integrations import (
    build_tracer_provider,
    get_tracer,
    instrument_all,
    instrument_httpx,
    instrument_logging,
    setup_fastapi_tracing,
    setup_tracing,
    shutdown_tracing,
)


def exporters_of(provider: TracerProvider) -> list:
    processors = provider._active_span_processor._span_processors
    return [p.span_exporter for p in processors]


class TestBuildTracerProvider:
    """Tests for build_tracer_provider."""

    def test_resource_attributes(self) -> None:
        provider = build_tracer_provider("chain-demo", service_version="1.0.0")
        attributes = provider.resource.attributes
        assert attributes["service.name"] == "chain-demo"
        assert attributes["service.version"] == "1.0.0"

    def test_no_exporters_by_default(self) -> None:
        provider = build_tracer_provider("svc")
        assert exporters_of(provider) == []

    def test_otlp_and_console_exporters(self) -> None:
        with patch.object(tracing_setup_module, "OTLPSpanExporter") as otlp, \
                patch.object(tracing_setup_module, "ConsoleSpanExporter") as console:
            provider = build_tracer_provider(
                "svc",
                otlp_endpoint="http://localhost:4317",
                console_output=True,
                use_batch_processor=False,
            )
        otlp.assert_called_once_with(endpoint="http://localhost:4317", insecure=True)
        console.assert_called_once_with()
        assert exporters_of(provider) == [otlp.return_value, console.return_value]

    def test_https_endpoint_is_secure(self) -> None:
        with patch.object(tracing_setup_module, "OTLPSpanExporter") as otlp:
            build_tracer_provider("svc", otlp_endpoint="https://collector:4317")
        otlp.assert_called_once_with(endpoint="https://collector:4317", insecure=False)

    def test_additional_exporters_with_simple_processor(self) -> None:
        exporter = InMemorySpanExporter()
        provider = build_tracer_provider(
            "svc", use_batch_processor=False, additional_exporters=[exporter]
        )
        processors = provider._active_span_processor._span_processors
        assert isinstance(processors[0], SimpleSpanProcessor)

        with provider.get_tracer("test").start_as_current_span("op"):
            pass
        assert [s.name for s in exporter.get_finished_spans()] == ["op"]


class TestSetupTracing:
    """Tests for setup_tracing / shutdown_tracing."""

    def test_installs_global_provider(self) -> None:
        with patch.object(tracing_setup_module.trace, "set_tracer_provider") as set_provider:
            provider = setup_tracing("svc")
            set_provider.assert_called_once_with(provider)
            assert tracing_setup_module._tracer_provider is provider

            shutdown_tracing()
            assert tracing_setup_module._tracer_provider is None

    def test_shutdown_without_setup_is_noop(self) -> None:
        tracing_setup_module._tracer_provider = None
        shutdown_tracing()  # Should not raise

    def test_shutdown_flushes_provider(self) -> None:
        provider = MagicMock()
        tracing_setup_module._tracer_provider = provider
        shutdown_tracing()
        provider.shutdown.assert_called_once()


class TestGetTracer:
    """Tests for get_tracer."""

    def test_uses_given_provider(self) -> None:
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))

        tracer = get_tracer("tracechain", tracer_provider=provider)
        with tracer.start_as_current_span("get_settings"):
            pass

        span = exporter.get_finished_spans()[0]
        assert span.instrumentation_scope.name == "tracechain"

    def test_global_provider(self) -> None:
        assert get_tracer("tracechain") is not None


class TestSetupFastapiTracing:
    """Tests for setup_fastapi_tracing."""

    def test_instruments_app(self) -> None:
        app = FastAPI()
        with patch(
            "opentelemetry.instrumentation.fastapi.FastAPIInstrumentor.instrument_app"
        ) as instrument_app:
            assert setup_fastapi_tracing(app) is True
        instrument_app.assert_called_once_with(
            app, tracer_provider=None, excluded_urls="health"
        )


class TestInstrumentHttpx:
    """Tests for instrument_httpx function."""

    def test_instrument_httpx_callable(self) -> None:
        assert callable(instrument_httpx)

    def test_instrument_httpx_enables_instrumentor(self) -> None:
        with patch(
            "opentelemetry.instrumentation.httpx.HTTPXClientInstrumentor.instrument"
        ) as instrument:
            assert instrument_httpx() is True
        instrument.assert_called_once()


class TestInstrumentLogging:
    """Tests for instrument_logging function."""

    def test_instrument_logging_enables_instrumentor(self) -> None:
        with patch(
            "opentelemetry.instrumentation.logging.LoggingInstrumentor.instrument"
        ) as instrument:
            assert instrument_logging() is True
        instrument.assert_called_once()


class TestInstrumentAll:
    """Tests for instrument_all function."""

    def test_instrument_all_returns_dict(self) -> None:
        with patch(
            "opentelemetry.instrumentation.httpx.HTTPXClientInstrumentor.instrument"
        ), patch(
            "opentelemetry.instrumentation.logging.LoggingInstrumentor.instrument"
        ):
            result = instrument_all()
        assert result == {"httpx": True, "logging": True}

    def test_instrument_all_reports_missing_package(self) -> None:
        with patch.dict("sys.modules", {"opentelemetry.instrumentation.httpx": None}), patch(
            "opentelemetry.instrumentation.logging.LoggingInstrumentor.instrument"
        ):
            result = instrument_all()
        assert result == {"httpx": False, "logging": True}
