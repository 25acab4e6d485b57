"""
tracechain - A traced three-tier call chain for exercising OpenTelemetry.

Three FastAPI tiers (users -> profiles -> settings) inject random latency and
errors, propagate trace context across each hop and write JSON logs that
carry the trace and span identifiers of the request.

Example:
    >>> from tracechain import ServiceConfig, create_app
    >>> app = create_app(ServiceConfig.from_env())
"""

__version__ = "1.0.0"

from tracechain.config import ServiceConfig
from tracechain.core.outcome import OutcomeKind, classify
from tracechain.core.handler import TierHandler, RequestContext
from tracechain.app import create_app

__all__ = [
    "ServiceConfig",
    "OutcomeKind",
    "classify",
    "TierHandler",
    "RequestContext",
    "create_app",
]
