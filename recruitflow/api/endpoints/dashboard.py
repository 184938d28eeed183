"""
HR dashboard endpoints: summary cards, charts and the recent list.
"""

import logging
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from recruitflow.core.database import get_db
from recruitflow.core.deps import get_current_user
from recruitflow.crud import cv_application as application_crud
from recruitflow.crud import job_position as position_crud
from recruitflow.models.cv_application import ApplicationStatus
from recruitflow.models.user import User
from recruitflow.schemas.cv_application import RecentApplicationResponse
from recruitflow.schemas.dashboard import DashboardCharts, DashboardSummary

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])
logger = logging.getLogger(__name__)

NEED_REVIEW_STATUSES = (ApplicationStatus.SUBMITTED.value, ApplicationStatus.REVIEWED.value)
ACCEPTED_STATUSES = (ApplicationStatus.HIRED.value, ApplicationStatus.ONBOARDING.value)
REJECTED_STATUSES = (ApplicationStatus.STAFF_REJECTED.value, ApplicationStatus.NOT_HIRED.value)


@router.get("/summary", response_model=DashboardSummary)
def get_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Counters for the dashboard cards.

    Status-based counts exclude archived applications; the totals do not.
    """
    return DashboardSummary(
        total_cv_count=application_crud.count_all(db),
        new_cv_last_24_hours=application_crud.count_since(db, datetime.utcnow() - timedelta(hours=24)),
        need_review_count=application_crud.count_active_in_statuses(db, NEED_REVIEW_STATUSES),
        accepted_cv_count=application_crud.count_active_in_statuses(db, ACCEPTED_STATUSES),
        rejected_cv_count=application_crud.count_active_in_statuses(db, REJECTED_STATUSES),
        active_positions_count=position_crud.count_open(db),
    )


@router.get("/charts", response_model=DashboardCharts)
def get_charts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Positions per status, applications per status and daily submissions for the past week."""
    charts = DashboardCharts(
        job_distribution=position_crud.status_distribution(db),
        status_distribution=application_crud.status_distribution(db),
        weekly_submission_trend=application_crud.daily_submission_counts(db, days=7),
    )
    logger.debug(f"Dashboard charts built ({len(charts.weekly_submission_trend)} trend points)")
    return charts


@router.get("/recent-applications", response_model=List[RecentApplicationResponse])
def get_recent_applications(
    limit: int = Query(5, gt=0, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return application_crud.get_recent(db, limit=limit)
