"""
Pydantic schemas for job positions (requisitions).
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime

from recruitflow.models.job_position import JobPositionStatus
from recruitflow.schemas.common import to_naive_utc


class JobPositionCreateRequest(BaseModel):
    """
    Request schema for a new requisition.

    There is no status field: every position starts as DRAFT.
    """
    name: str = Field(..., min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    registration_start_date: Optional[datetime] = None
    registration_end_date: Optional[datetime] = None
    specific_requirements: Optional[str] = None
    available_slots: int = Field(1, ge=1)
    announcement: Optional[str] = None

    @field_validator("registration_start_date", "registration_end_date")
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_window(self):
        if (
            self.registration_start_date
            and self.registration_end_date
            and self.registration_end_date < self.registration_start_date
        ):
            raise ValueError("registration_end_date must not be before registration_start_date")
        return self


class JobPositionUpdateRequest(BaseModel):
    """
    Partial update. A status value different from the current one is a
    workflow transition and is validated against the caller's role.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    registration_start_date: Optional[datetime] = None
    registration_end_date: Optional[datetime] = None
    specific_requirements: Optional[str] = None
    available_slots: Optional[int] = Field(None, ge=1)
    announcement: Optional[str] = None
    status: Optional[str] = None  # validated against the workflow table

    class Config:
        extra = "forbid"  # is_archived is only changed via archive/unarchive

    @field_validator("registration_start_date", "registration_end_date")
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class RequesterSummary(BaseModel):
    id: int
    name: str
    department: Optional[str] = None

    class Config:
        from_attributes = True


class JobPositionResponse(BaseModel):
    id: int
    name: str
    location: Optional[str]
    registration_start_date: Optional[datetime]
    registration_end_date: Optional[datetime]
    specific_requirements: Optional[str]
    available_slots: int
    announcement: Optional[str]
    status: JobPositionStatus
    is_archived: bool
    requested_by_id: Optional[int]
    requested_by: Optional[RequesterSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicJobPositionResponse(BaseModel):
    """What the careers page sees."""
    id: int
    name: str
    location: Optional[str]
    registration_start_date: Optional[datetime]
    registration_end_date: Optional[datetime]
    specific_requirements: Optional[str]
    available_slots: int
    announcement: Optional[str]

    class Config:
        from_attributes = True
