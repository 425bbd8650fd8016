"""
Shared response schemas for Gigboard Service.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel


class IdResponse(BaseModel):
    """Returned by mutations that only hand back the affected id."""
    id: int
    message: str = "OK"


class ErrorResponse(BaseModel):
    """Body of every domain error response."""
    error_code: str
    error_message: str
    details: Dict[str, Any] = {}
    timestamp: datetime


class HealthCheckResponse(BaseModel):
    """Schema for health check response."""
    status: str
    version: str
    database: str
    redis: str
    timestamp: Optional[datetime] = None
