"""Pydantic schemas for the health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus store connectivity, for load balancers."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    service: str = Field(default="bazaar-admin", description="Service name")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Marketplace database connectivity at the time of the check",
    )
