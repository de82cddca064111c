"""
SkateMap Backend: Shared Response Schemas
===========================================

What:  Error envelope used by every endpoint, and the health check body.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description, shown verbatim in the map's error banner
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "validation_error",
            "message": "Please choose a rating.",
            "details": {"field": "rating"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    Health check response showing service and dependency status.

    status: healthy (all good), degraded (Overpass unavailable; spots still
    work), unhealthy (database unreachable).
    """
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    overpass: str = Field(description="Overpass status: available, unavailable, circuit_open")
    uptime_seconds: float = Field(description="Seconds since service started")
