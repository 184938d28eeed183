"""
Pydantic schemas for the HR dashboard.
"""

from pydantic import BaseModel
from typing import Dict, List


class DashboardSummary(BaseModel):
    total_cv_count: int
    new_cv_last_24_hours: int
    need_review_count: int
    accepted_cv_count: int
    rejected_cv_count: int
    active_positions_count: int


class DailyCount(BaseModel):
    date: str  # YYYY-MM-DD
    count: int


class DashboardCharts(BaseModel):
    job_distribution: Dict[str, int]
    status_distribution: Dict[str, int]
    weekly_submission_trend: List[DailyCount]
