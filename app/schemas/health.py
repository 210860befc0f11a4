"""Health check payload."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Service liveness plus user-store reachability."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    service: str = Field(default="users-api", description="Service name")
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="User store connectivity, when checked",
    )
    auth_schemes: list[str] = Field(
        default_factory=lambda: ["Basic", "Bearer"],
        description="Authorization schemes accepted on protected routes",
    )
