"""
Environment-driven service configuration.

A single :class:`ServiceConfig` is resolved at process start and passed
explicitly into the application factory and the request handlers.

Example:
    >>> from tracechain.config import ServiceConfig
    >>> config = ServiceConfig.from_env({"SERVICE_NAME": "service-b"})
    >>> config.port
    3001
    >>> config.downstream_url("service-c", "/api/settings")
    'http://localhost:3002/api/settings'
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

SERVICE_A = "service-a"
SERVICE_B = "service-b"
SERVICE_C = "service-c"

DEFAULT_ROLE = SERVICE_A
DEFAULT_PORTS = {SERVICE_A: 3000, SERVICE_B: 3001, SERVICE_C: 3002}
DEFAULT_OTEL_SERVICE_NAME = "tracechain"
DEFAULT_OTLP_ENDPOINT = "http://localhost:4317"
SERVICE_VERSION = "1.0.0"
MIN_PORT = 1
MAX_PORT = 65535

_TRUTHY = {"1", "true", "yes", "on"}


def _int_env(
    environ: Mapping[str, str], key: str, default: int, allow_zero: bool = False
) -> int:
    """Read an integer variable, falling back to ``default`` when unparseable.

    Zero counts as unset unless ``allow_zero`` is given, so a port of 0
    resolves to the default.
    """
    raw = environ.get(key)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", key, raw, default)
        return default
    if value == 0 and not allow_zero:
        return default
    return value


def _port_env(environ: Mapping[str, str], key: str, default: int) -> int:
    """Read a TCP port, falling back to ``default`` outside 1-65535."""
    value = _int_env(environ, key, default)
    if not MIN_PORT <= value <= MAX_PORT:
        logger.warning("Ignoring out-of-range %s=%d, using %d", key, value, default)
        return default
    return value


@dataclass(frozen=True)
class ServiceConfig:
    """Resolved configuration for one service process.

    Attributes:
        role: Role selector (``service-a``, ``service-b`` or ``service-c``)
        service_a_port: Port of tier A
        service_b_port: Port of tier B
        service_c_port: Port of tier C
        downstream_host: Host used for tier-to-tier calls
        otel_service_name: ``service.name`` resource attribute
        otlp_endpoint: OTLP trace exporter endpoint
        console_spans: Whether finished spans are also printed to stdout
        log_level: Root log level name
        latency_min_ms: Lower bound of the simulated latency
        latency_max_ms: Upper bound of the simulated latency
    """
    role: str = DEFAULT_ROLE
    service_a_port: int = DEFAULT_PORTS[SERVICE_A]
    service_b_port: int = DEFAULT_PORTS[SERVICE_B]
    service_c_port: int = DEFAULT_PORTS[SERVICE_C]
    downstream_host: str = "localhost"
    otel_service_name: str = DEFAULT_OTEL_SERVICE_NAME
    otlp_endpoint: str = DEFAULT_OTLP_ENDPOINT
    console_spans: bool = False
    log_level: str = "INFO"
    latency_min_ms: int = 100
    latency_max_ms: int = 2000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServiceConfig":
        """Build a configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Resolved ServiceConfig
        """
        env = os.environ if environ is None else environ
        return cls(
            role=env.get("SERVICE_NAME") or DEFAULT_ROLE,
            service_a_port=_port_env(env, "SERVICE_A_PORT", DEFAULT_PORTS[SERVICE_A]),
            service_b_port=_port_env(env, "SERVICE_B_PORT", DEFAULT_PORTS[SERVICE_B]),
            service_c_port=_port_env(env, "SERVICE_C_PORT", DEFAULT_PORTS[SERVICE_C]),
            downstream_host=env.get("DOWNSTREAM_HOST") or "localhost",
            otel_service_name=env.get("OTEL_SERVICE_NAME") or DEFAULT_OTEL_SERVICE_NAME,
            otlp_endpoint=env.get("OTEL_EXPORTER_OTLP_ENDPOINT") or DEFAULT_OTLP_ENDPOINT,
            console_spans=env.get("TRACECHAIN_CONSOLE_SPANS", "").lower() in _TRUTHY,
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            latency_min_ms=_int_env(env, "TRACECHAIN_LATENCY_MIN_MS", 100, allow_zero=True),
            latency_max_ms=_int_env(env, "TRACECHAIN_LATENCY_MAX_MS", 2000, allow_zero=True),
        )

    @property
    def service_name(self) -> str:
        """Label used in log lines and the health endpoint."""
        return self.role

    def port_for(self, role: str) -> int:
        """Return the port of a role; unknown roles map to tier C."""
        if role == SERVICE_A:
            return self.service_a_port
        if role == SERVICE_B:
            return self.service_b_port
        return self.service_c_port

    @property
    def port(self) -> int:
        """Port this process binds, selected by its role."""
        return self.port_for(self.role)

    @property
    def is_known_role(self) -> bool:
        return self.role in DEFAULT_PORTS

    def downstream_url(self, role: str, path: str) -> str:
        """Absolute URL of ``path`` on the tier running ``role``."""
        return f"http://{self.downstream_host}:{self.port_for(role)}{path}"

    @property
    def latency_window(self) -> tuple[float, float]:
        """Simulated latency bounds in seconds."""
        return self.latency_min_ms / 1000.0, self.latency_max_ms / 1000.0
