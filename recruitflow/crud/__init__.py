"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer keeps query code out of the API routes.
"""

from recruitflow.crud import user, job_position, cv_application, schedule

__all__ = ["user", "job_position", "cv_application", "schedule"]
