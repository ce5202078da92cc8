from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class HealthOut(BaseModel):
    """Health check response."""

    status: str = Field(
        description="Service status indicator. `ok` means the API process is up and responding.",
        examples=["ok"],
    )
    timestamp: datetime = Field(
        description="Current server time (UTC).",
        examples=["2026-01-01T12:00:00.000000Z"],
    )


class ErrorOut(BaseModel):
    """Error payload returned for every failed request."""

    error: str = Field(description="Human-readable error category message.")
    details: str | None = Field(
        default=None,
        description="Additional detail, e.g. the upstream provider's error message.",
    )
