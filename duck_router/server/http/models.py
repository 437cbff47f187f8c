"""Pydantic models for the service health endpoint."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class DatabaseHealth(BaseModel):
    connected: bool


class HealthResponse(BaseModel):
    """Liveness report combining database reachability and process uptime."""

    status: Literal["healthy", "unhealthy"]
    timestamp: str
    database: DatabaseHealth
    uptime: float = Field(..., description="Seconds since the application was created.")

    @classmethod
    def from_check(
        cls, *, connected: bool, timestamp: str, uptime: float
    ) -> "HealthResponse":
        return cls(
            status="healthy" if connected else "unhealthy",
            timestamp=timestamp,
            database=DatabaseHealth(connected=connected),
            uptime=uptime,
        )


__all__ = ["DatabaseHealth", "HealthResponse"]
