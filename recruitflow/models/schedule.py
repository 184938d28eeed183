from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from recruitflow.core.database import Base


class Schedule(Base):
    """
    A calendar entry.

    Entries linked to an application are interviews or onboarding sessions;
    entries without one are manual HR events such as holidays.
    """
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False, index=True)
    description = Column(Text, nullable=True)

    application_id = Column(
        Integer,
        ForeignKey("cv_applications.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
        index=True
    )

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    application = relationship("CvApplication", back_populates="schedules")

    def __repr__(self):
        return f"<Schedule(id={self.id}, title='{self.title}', start={self.start_date})>"
