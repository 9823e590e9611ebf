"""
TutorMatch Backend: Shared Response Schemas
=============================================

What:  View-model pieces shared by every page plus the error and health formats.
How:   FastAPI serializes these into JSON and documents them in OpenAPI.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class SearchCategories(BaseModel):
    """
    What:  The searchable categories (majors) shown in every page header.
    Who:   Built by the category loader; embedded in every page response.

    The two lists are index-aligned: short_names[i] belongs to long_names[i].
    Both are empty when the categories could not be loaded.
    """
    short_names: List[str] = Field(default_factory=list, description="Major short codes, e.g. CSC")
    long_names: List[str] = Field(default_factory=list, description="Major display names")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "server_error")
        message: Human-readable description for display to users
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "validation_error",
            "message": "Unknown category 'XYZ'.",
            "details": {"field": "category", "category": "XYZ"},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer health checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
