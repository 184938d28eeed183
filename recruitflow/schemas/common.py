"""
Shared schema pieces.
"""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, Field


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC; convert aware inputs."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class IdListRequest(BaseModel):
    """Request body for bulk actions."""
    ids: List[int] = Field(..., min_length=1)


class BulkActionResponse(BaseModel):
    message: str
    affected_count: int
