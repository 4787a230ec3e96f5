"""
Copydesk Backend — Shared Response Schemas
============================================

What:  Error and health response models used across routers.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error body returned by every endpoint.

    Example:
        {"message": "Invalid or expired token"}

    The request correlation ID travels in the X-Request-ID header instead.
    """
    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    llm: str = Field(description="Generation API status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
