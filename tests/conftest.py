"""Shared fixtures for the tracechain test suite."""

from __future__ import annotations

from typing import Callable, List

import httpx
import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from tracechain.config import ServiceConfig


class FixedRandom:
    """Random source returning a fixed draw and the lower latency bound."""

    def __init__(self, value: float) -> None:
        self.value = value
        self.uniform_calls: List[tuple] = []

    def random(self) -> float:
        return self.value

    def uniform(self, a: float, b: float) -> float:
        self.uniform_calls.append((a, b))
        return a


SUCCESS_DRAW = 0.5
CLIENT_ERROR_DRAW = 0.15
SERVER_ERROR_DRAW = 0.05

PROFILES_BODY = {
    "active_profiles": 45,
    "inactive_profiles": 12,
    "settings": {"theme": "dark"},
    "last_sync": "2024-01-01T00:00:00+00:00",
}


@pytest.fixture
def config() -> ServiceConfig:
    """Configuration with the simulated latency disabled."""
    return ServiceConfig(latency_min_ms=0, latency_max_ms=0)


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter: InMemorySpanExporter) -> TracerProvider:
    """Tracer provider exporting finished spans to memory."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider


@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def mock_client_factory(
    recorded_requests: List[httpx.Request],
) -> Callable[..., httpx.AsyncClient]:
    """Build AsyncClients whose transport records requests.

    The returned factory accepts either a JSON body to answer with, an
    ``httpx.Response`` status code via ``status_code``, or ``fail=True`` to
    raise a connection error.
    """
    def factory(body=None, status_code: int = 200, fail: bool = False) -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            if fail:
                raise httpx.ConnectError("Connection refused", request=request)
            return httpx.Response(status_code, json=body if body is not None else {})

        return httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=None)

    return factory
