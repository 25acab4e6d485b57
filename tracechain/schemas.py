"""
Response models for the tier and health endpoints.

These document the JSON shapes in the OpenAPI schema. Tier handlers build
their bodies directly; only the health endpoint validates through a model.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every non-200 tier response.

    Attributes:
        error: Human-readable error description
    """
    error: str = Field(..., description="Human-readable error description")


class HealthResponse(BaseModel):
    """Response model for the health endpoint.

    Attributes:
        status: Always ``healthy``
        service: Service label of this process
        timestamp: ISO-8601 UTC time of the check
    """
    status: str = "healthy"
    service: str
    timestamp: str


class UserResponse(BaseModel):
    """One entry of the tier A user list."""
    id: int
    name: str
    email: str
    status: str


class UsersResponse(BaseModel):
    """Tier A success body."""
    users: List[UserResponse]
    profile_data: Optional[Dict[str, Any]]
    total_count: int


class ProfilesResponse(BaseModel):
    """Tier B success body."""
    active_profiles: int
    inactive_profiles: int
    settings: Optional[Dict[str, Any]]
    last_sync: str


class FeatureFlags(BaseModel):
    beta_features: bool
    analytics: bool


class SettingsResponse(BaseModel):
    """Tier C success body."""
    theme: str
    notifications: bool
    language: str
    timezone: str
    features: FeatureFlags


SUCCESS_MODELS = {
    "/api/users": UsersResponse,
    "/api/profiles": ProfilesResponse,
    "/api/settings": SettingsResponse,
}


def error_responses(*status_codes: int) -> Dict[int | str, Dict[str, Any]]:
    """OpenAPI ``responses`` entries for the given error status codes."""
    return {code: {"model": ErrorResponse} for code in status_codes}
