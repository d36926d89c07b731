"""Request/Response schemas for the focustree API.

The stores exchange the domain models directly (camelCase JSON); these
models cover the envelopes around them.
"""

from typing import Any

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str


class UpdateSessionRequest(BaseModel):
    """Partial update of one timer session (camelCase field names)."""

    id: str
    updates: dict[str, Any] = Field(default_factory=dict)


class AppInfo(BaseModel):
    name: str
    version: str
