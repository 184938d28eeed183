"""
Pydantic schemas for calendar entries.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from recruitflow.schemas.common import to_naive_utc


class ScheduleCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    start_date: datetime
    end_date: datetime
    description: Optional[str] = None
    application_id: Optional[int] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class ScheduleUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    description: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class ScheduleResponse(BaseModel):
    id: int
    title: str
    start_date: datetime
    end_date: datetime
    description: Optional[str]
    application_id: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True
