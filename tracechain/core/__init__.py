"""
tracechain.core - Request handling protocol shared by the three tiers.
"""

from tracechain.core.errors import (
    TierError,
    SimulatedClientError,
    SimulatedServerError,
    DownstreamUnavailable,
)
from tracechain.core.outcome import OutcomeKind, classify, draw_outcome, simulate_latency
from tracechain.core.tiers import TierProfile, DownstreamTarget, TIER_PROFILES
from tracechain.core.handler import (
    TierHandler,
    RequestContext,
    DownstreamResult,
    call_downstream,
)

__all__ = [
    "TierError",
    "SimulatedClientError",
    "SimulatedServerError",
    "DownstreamUnavailable",
    "OutcomeKind",
    "classify",
    "draw_outcome",
    "simulate_latency",
    "TierProfile",
    "DownstreamTarget",
    "TIER_PROFILES",
    "TierHandler",
    "RequestContext",
    "DownstreamResult",
    "call_downstream",
]
