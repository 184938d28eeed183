"""
HR calendar endpoints.

Entries linked to an application are interview/onboarding slots and may
not overlap anything else. Manual entries (holidays, meetings) may.
"""

import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional

from recruitflow.core.database import get_db
from recruitflow.core.deps import get_current_user, get_hr_staff
from recruitflow.crud import cv_application as application_crud
from recruitflow.crud import schedule as schedule_crud
from recruitflow.models.schedule import Schedule
from recruitflow.models.user import User
from recruitflow.schemas.common import to_naive_utc
from recruitflow.schemas.schedule import ScheduleCreateRequest, ScheduleResponse, ScheduleUpdateRequest

router = APIRouter(prefix="/schedules", tags=["Schedules"])
logger = logging.getLogger(__name__)


def _get_schedule_or_404(db: Session, schedule_id: int) -> Schedule:
    schedule = schedule_crud.get_by_id(db, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return schedule


def _check_slot(db: Session, start: datetime, end: datetime, linked: bool, exclude_id: Optional[int] = None) -> None:
    if end <= start:
        raise HTTPException(status_code=400, detail="end_date must be after start_date")
    if linked:
        clash = schedule_crud.find_overlapping(db, start, end, exclude_id=exclude_id)
        if clash:
            raise HTTPException(status_code=409, detail=f"Slot overlaps '{clash.title}'")


@router.get("", response_model=List[ScheduleResponse])
def list_schedules(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Calendar entries, optionally limited to those intersecting [start, end]."""
    return schedule_crud.get_multi(db, start=to_naive_utc(start), end=to_naive_utc(end))


@router.post("", response_model=ScheduleResponse, status_code=201)
def create_schedule(
    schedule_data: ScheduleCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    """
    Add a calendar entry.

    Raises:
        HTTPException 400: end_date not after start_date
        HTTPException 404: application_id does not exist
        HTTPException 409: Linked entry overlaps an existing one
    """
    linked = schedule_data.application_id is not None
    if linked and not application_crud.get_by_id(db, schedule_data.application_id):
        raise HTTPException(status_code=404, detail="Application not found")

    _check_slot(db, schedule_data.start_date, schedule_data.end_date, linked)

    schedule = schedule_crud.create(
        db,
        title=schedule_data.title,
        start_date=schedule_data.start_date,
        end_date=schedule_data.end_date,
        description=schedule_data.description,
        application_id=schedule_data.application_id,
    )
    logger.info(f"Schedule {schedule.id} created by user {current_user.id}")
    return schedule


@router.get("/{schedule_id}", response_model=ScheduleResponse)
def get_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _get_schedule_or_404(db, schedule_id)


@router.put("/{schedule_id}", response_model=ScheduleResponse)
def update_schedule(
    schedule_id: int,
    update_data: ScheduleUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    """
    Edit a calendar entry. Nulls on title or dates leave them unchanged.

    Raises:
        HTTPException 400: end_date not after start_date
        HTTPException 404: Schedule not found
        HTTPException 409: Linked entry would overlap another one
        HTTPException 500: Database error
    """
    schedule = _get_schedule_or_404(db, schedule_id)
    changes = update_data.model_dump(exclude_unset=True)

    for field in ("title", "start_date", "end_date"):
        if field in changes and changes[field] is None:
            changes.pop(field)

    start = changes.get("start_date", schedule.start_date)
    end = changes.get("end_date", schedule.end_date)
    _check_slot(db, start, end, schedule.application_id is not None, exclude_id=schedule.id)

    try:
        schedule = schedule_crud.update(db, schedule, changes)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update schedule {schedule_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update schedule")

    return schedule


@router.delete("/{schedule_id}", status_code=204)
def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    schedule = _get_schedule_or_404(db, schedule_id)
    schedule_crud.delete(db, schedule)
    logger.info(f"Schedule {schedule_id} deleted by user {current_user.id}")
    return None
