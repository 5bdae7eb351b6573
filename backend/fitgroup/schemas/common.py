"""
FitGroup Backend — Shared Schema Building Blocks
================================================

What:  Base model with camelCase aliases, pagination envelope, error and
       health response models.
Why:   The public API speaks camelCase (`ownerNickname`, `likeCount`) while
       Python code stays snake_case. `populate_by_name` keeps snake_case
       input working too.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for every request/response body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Page(CamelModel, Generic[T]):
    """
    Offset-paginated list envelope: `{"data": [...], "total": N}`.

    `total` counts every item matching the filters, not just this page.
    """

    data: List[T] = Field(description="Items on the requested page")
    total: int = Field(description="Total number of matching items")


class ErrorResponse(CamelModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "unauthorized",
            "message": "Wrong password",
            "requestId": "1f0c9a2b"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    """Service and database status, returned by GET /health."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
