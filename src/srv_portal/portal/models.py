"""Portal API models."""

from typing import Optional

from pydantic import BaseModel


class HealthStatus(BaseModel):
    """Health check response model."""
    status: str
    records_cached: int
    managed_records: int
    fetched_at: Optional[float] = None
    source_configured: bool
    last_refresh_error: Optional[str] = None
    redirect_overrides: int = 0
