"""
Pydantic schemas for CV applications.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, Literal, Optional
from datetime import datetime

from recruitflow.models.cv_application import ApplicationStatus
from recruitflow.schemas.common import to_naive_utc


class PositionSummary(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ApplicationResponse(BaseModel):
    id: int
    full_name: str
    email: str
    qualification: Optional[str]
    agree_terms: bool
    cv_file_name: str
    status: ApplicationStatus
    score: Optional[float] = None
    justification: Optional[str] = None
    similarity_score: Optional[float] = None
    passed_hard_gate: Optional[bool] = None
    qualitative_assessment: Optional[Any] = None
    cv_data: Optional[Any] = None
    requirement_data: Optional[Any] = None
    interview_notes: Optional[Dict[str, Any]] = None
    is_archived: bool
    applied_position_id: Optional[int]
    applied_position: Optional[PositionSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationSubmittedResponse(BaseModel):
    message: str
    application_id: int
    status: ApplicationStatus


class RecentApplicationResponse(BaseModel):
    id: int
    full_name: str
    qualification: Optional[str]
    status: ApplicationStatus
    created_at: datetime

    class Config:
        from_attributes = True


class StatusUpdateRequest(BaseModel):
    """
    Move an application and/or record interview notes.

    When status is omitted, a manager_decision or final_decision in the
    notes may still imply a transition.
    """
    status: Optional[str] = None
    interview_notes: Optional[Dict[str, Any]] = None


class AnalysisResultRequest(BaseModel):
    """Result posted back by the external CV analysis workflow."""
    # Strict: "0.8" or "yes" are rejected, the workflow must send JSON numbers/booleans
    similarity_score: float = Field(..., strict=True)
    passed_hard_gate: bool = Field(..., strict=True)
    score: Optional[float] = None
    justification: Optional[str] = None
    qualitative_assessment: Optional[Any] = None
    cv_data: Optional[Any] = None
    requirement_data: Optional[Any] = None


class TriggerScheduleRequest(BaseModel):
    """
    Book an interview/onboarding slot for an application.

    type decides which stage is being scheduled:
    - manager: INTERVIEW_QUEUED -> INTERVIEW_SCHEDULED
    - final_hr: PENDING_FINAL_DECISION -> FINAL_INTERVIEW_SCHEDULED
    - onboarding: HIRED -> ONBOARDING
    """
    type: Literal["manager", "final_hr", "onboarding"]
    date_time: datetime
    end_time: Optional[datetime] = None
    preference: Optional[str] = Field(None, max_length=100)
    notes_from_hr: Optional[str] = None
    schedule_link: Optional[str] = Field(None, max_length=1000)

    @field_validator("date_time", "end_time")
    @classmethod
    def normalize(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class TriggerScheduleResponse(BaseModel):
    message: str
    application: ApplicationResponse
    schedule_id: int
