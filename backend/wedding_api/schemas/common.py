"""
Wedding Gallery Backend — Shared Response Schemas
===================================================

What:  Bodies returned by more than one route: the error envelope and the
       health report.
Who:   Every route's `responses=` documentation, the global exception
       handlers in main.py, and the /health route.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failing endpoint.

    Example:
        {"error": "No file uploaded", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Field-level errors, if any")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    blessing_store: str = Field(description="Configured store backend: memory, database")
    store: str = Field(description="Store reachability: available, unavailable")
    media: str = Field(description="Media host status: available, unavailable, unconfigured")
    uptime_seconds: float = Field(description="Seconds since service started")
