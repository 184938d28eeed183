import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import JSONB
from recruitflow.core.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class ApplicationStatus(str, enum.Enum):
    """
    Candidate pipeline states, in pipeline order.

    Allowed moves between them live in recruitflow.services.workflow.
    """
    SUBMITTED = "SUBMITTED"
    REVIEWED = "REVIEWED"
    STAFF_APPROVED = "STAFF_APPROVED"
    STAFF_REJECTED = "STAFF_REJECTED"
    INTERVIEW_QUEUED = "INTERVIEW_QUEUED"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    PENDING_FINAL_DECISION = "PENDING_FINAL_DECISION"
    FINAL_INTERVIEW_SCHEDULED = "FINAL_INTERVIEW_SCHEDULED"
    HIRED = "HIRED"
    NOT_HIRED = "NOT_HIRED"
    ONBOARDING = "ONBOARDING"


class CvApplication(Base):
    """
    A CV submitted through the careers page, plus everything the pipeline
    attaches to it: AI analysis output and interview notes.
    """
    __tablename__ = "cv_applications"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    qualification = Column(String(255), nullable=True)
    agree_terms = Column(Boolean, nullable=False, default=False)

    cv_file_name = Column(String(255), nullable=False)
    cv_file_object_key = Column(String(512), nullable=False)

    status = Column(String(40), nullable=False, default=ApplicationStatus.SUBMITTED.value, index=True)

    # Scoring
    score = Column(Float, nullable=True)
    justification = Column(Text, nullable=True)
    similarity_score = Column(Float, nullable=True, index=True)
    passed_hard_gate = Column(Boolean, nullable=True)
    qualitative_assessment = Column(JSONType, nullable=True)
    cv_data = Column(JSONType, nullable=True)
    requirement_data = Column(JSONType, nullable=True)

    # preference, scheduled_time, manager_decision, final_decision, schedule_link, ...
    interview_notes = Column(JSONType, nullable=True)

    is_archived = Column(Boolean, nullable=False, default=False, index=True)

    applied_position_id = Column(
        Integer,
        ForeignKey("job_positions.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
        index=True
    )

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    # Relationships
    applied_position = relationship("JobPosition", back_populates="applications")
    schedules = relationship("Schedule", back_populates="application")

    def __repr__(self):
        return f"<CvApplication(id={self.id}, email='{self.email}', status={self.status})>"
