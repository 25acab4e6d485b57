"""
Tier profiles for the simulated A -> B -> C call chain.

A :class:`TierProfile` holds everything that differs between the three
endpoints: route, span name, log and error messages, the downstream hop and
the payload builder. The request handling itself lives in
:mod:`tracechain.core.handler` and is shared by all tiers.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from tracechain.config import SERVICE_A, SERVICE_B, SERVICE_C
from tracechain.core.errors import (
    DownstreamUnavailable,
    SimulatedClientError,
    SimulatedServerError,
    TierError,
)
from tracechain.core.outcome import OutcomeKind

Payload = Dict[str, Any]


@dataclass(frozen=True)
class DownstreamTarget:
    """The next tier in the chain.

    Attributes:
        role: Role of the tier being called
        path: Route requested on that tier
        failure_log: Prefix of the error line logged when the call fails
        unavailable_message: ``error`` field of the 503 body
    """
    role: str
    path: str
    failure_log: str
    unavailable_message: str

    def unavailable(self, exc: BaseException) -> DownstreamUnavailable:
        """Convert a failed call into this tier's 503 error value."""
        reason = str(exc) or type(exc).__name__
        return DownstreamUnavailable(
            self.unavailable_message,
            span_message=reason,
            log_message=f"{self.failure_log}: {reason}",
        )


@dataclass(frozen=True)
class TierProfile:
    """Static description of one tier endpoint."""
    role: str
    route: str
    operation: str
    start_log: str
    success_log: str
    server_error_log: str
    server_error_message: str
    client_error_log: str
    client_error_message: str
    build_payload: Callable[[Optional[Payload]], Payload]
    downstream: Optional[DownstreamTarget] = None

    def error_for(self, outcome: OutcomeKind) -> Optional[TierError]:
        """Return the error value for a failed outcome, None on success."""
        if outcome is OutcomeKind.SERVER_ERROR:
            return SimulatedServerError(
                self.server_error_message, log_message=self.server_error_log
            )
        if outcome is OutcomeKind.CLIENT_ERROR:
            return SimulatedClientError(
                self.client_error_message, log_message=self.client_error_log
            )
        return None

    def success_message(self, payload: Payload) -> str:
        return self.success_log.format(**payload)


USERS: List[Payload] = [
    {"id": 1, "name": "John Doe", "email": "john@example.com", "status": "active"},
    {"id": 2, "name": "Jane Smith", "email": "jane@example.com", "status": "inactive"},
]

SETTINGS: Payload = {
    "theme": "dark",
    "notifications": True,
    "language": "en",
    "timezone": "UTC",
    "features": {
        "beta_features": False,
        "analytics": True,
    },
}


def build_users_payload(profile_data: Optional[Payload]) -> Payload:
    users = copy.deepcopy(USERS)
    return {
        "users": users,
        "profile_data": profile_data,
        "total_count": len(users),
    }


def build_profiles_payload(settings: Optional[Payload]) -> Payload:
    return {
        "active_profiles": 45,
        "inactive_profiles": 12,
        "settings": settings,
        "last_sync": datetime.now(timezone.utc).isoformat(),
    }


def build_settings_payload(_: Optional[Payload] = None) -> Payload:
    return copy.deepcopy(SETTINGS)


USERS_TIER = TierProfile(
    role=SERVICE_A,
    route="/api/users",
    operation="get_users",
    start_log="Processing user request",
    success_log="Successfully processed {total_count} users",
    server_error_log="Internal server error occurred",
    server_error_message="Internal server error",
    client_error_log="Bad request received",
    client_error_message="Bad request",
    build_payload=build_users_payload,
    downstream=DownstreamTarget(
        role=SERVICE_B,
        path="/api/profiles",
        failure_log="Error calling profile service",
        unavailable_message="Service unavailable",
    ),
)

PROFILES_TIER = TierProfile(
    role=SERVICE_B,
    route="/api/profiles",
    operation="get_profiles",
    start_log="Processing profile request",
    success_log="Successfully retrieved profile data",
    server_error_log="Profile service error",
    server_error_message="Profile service error",
    client_error_log="Invalid profile request",
    client_error_message="Invalid request",
    build_payload=build_profiles_payload,
    downstream=DownstreamTarget(
        role=SERVICE_C,
        path="/api/settings",
        failure_log="Error calling settings service",
        unavailable_message="Settings service unavailable",
    ),
)

SETTINGS_TIER = TierProfile(
    role=SERVICE_C,
    route="/api/settings",
    operation="get_settings",
    start_log="Processing settings request",
    success_log="Successfully retrieved settings data",
    server_error_log="Settings service database error",
    server_error_message="Database error",
    client_error_log="Invalid settings query",
    client_error_message="Invalid query",
    build_payload=build_settings_payload,
)

TIER_PROFILES: Dict[str, TierProfile] = {
    profile.role: profile for profile in (USERS_TIER, PROFILES_TIER, SETTINGS_TIER)
}
