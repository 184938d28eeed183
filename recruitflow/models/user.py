import enum
from datetime import datetime
from sqlalchemy import CheckConstraint, Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from recruitflow.core.database import Base


class UserRole(str, enum.Enum):
    """
    Staff roles.

    - HEAD_HR: approves requisitions and makes final hiring decisions
    - STAFF_HR: publishes positions and runs the candidate pipeline
    - MANAGER: requests positions and interviews candidates
    """
    HEAD_HR = "head_hr"
    STAFF_HR = "staff_hr"
    MANAGER = "manager"


class User(Base):
    """
    Staff account. Managers belong to a department; HR roles do not.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role <> 'manager' OR department IS NOT NULL", name="ck_users_manager_department"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.STAFF_HR.value, index=True)
    department = Column(String(255), nullable=True)
    avatar_object_key = Column(String(512), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    # No delete cascade: positions outlive the user who requested them
    requested_positions = relationship("JobPosition", back_populates="requested_by")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
