import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from recruitflow.core.database import Base


class JobPositionStatus(str, enum.Enum):
    """
    Requisition lifecycle.

    - DRAFT: requested, waiting for Head HR
    - APPROVED: approved by Head HR, not yet published
    - REJECTED: turned down by Head HR
    - OPEN: published on the careers page
    - CLOSED: no longer accepting applications
    """
    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    REJECTED = "REJECTED"


class JobPosition(Base):
    """
    A job requisition and, once published, a public opening.

    Status is stored as a plain string column so new states do not
    need an enum migration.
    """
    __tablename__ = "job_positions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    location = Column(String(255), nullable=True)
    registration_start_date = Column(DateTime, nullable=True)
    registration_end_date = Column(DateTime, nullable=True)
    specific_requirements = Column(Text, nullable=True)
    available_slots = Column(Integer, nullable=False, default=1)
    announcement = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default=JobPositionStatus.DRAFT.value, index=True)
    is_archived = Column(Boolean, nullable=False, default=False, index=True)

    requested_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL", onupdate="CASCADE"), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    # Relationships
    requested_by = relationship("User", back_populates="requested_positions")
    applications = relationship("CvApplication", back_populates="applied_position")

    def is_accepting_applications(self, now: datetime) -> bool:
        """True when published, not archived and inside the registration window."""
        if self.status != JobPositionStatus.OPEN.value or self.is_archived:
            return False
        if self.registration_start_date and now < self.registration_start_date:
            return False
        if self.registration_end_date and now > self.registration_end_date:
            return False
        return True

    def __repr__(self):
        return f"<JobPosition(id={self.id}, name='{self.name}', status={self.status})>"
