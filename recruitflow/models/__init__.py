"""
Database models package.
"""

from recruitflow.models.user import User, UserRole
from recruitflow.models.job_position import JobPosition, JobPositionStatus
from recruitflow.models.cv_application import CvApplication, ApplicationStatus
from recruitflow.models.schedule import Schedule

__all__ = [
    "User", "UserRole",
    "JobPosition", "JobPositionStatus",
    "CvApplication", "ApplicationStatus",
    "Schedule",
]
