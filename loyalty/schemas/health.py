"""Pydantic models for health endpoints."""

from typing import Optional

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Response model for service health checks."""

    status: str = "healthy"
    accrual_processor_running: Optional[bool] = None
