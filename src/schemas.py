"""Pydantic schemas for service-level endpoints."""

from datetime import datetime

from pydantic import BaseModel


class RootResponse(BaseModel):
    """Response model for the root endpoint."""

    ok: bool = True
    service: str
    time: datetime


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""

    status: str
    database: str
    timestamp: datetime
