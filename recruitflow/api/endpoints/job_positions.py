"""
Job position (requisition) endpoints.

Lifecycle: DRAFT -> APPROVED/REJECTED (Head HR) -> OPEN (published) -> CLOSED.
Status changes arrive through PUT /{id} and are checked against
recruitflow.services.workflow.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional

from recruitflow.core.database import get_db
from recruitflow.core.deps import get_current_user, get_hr_staff, raise_for_workflow_error
from recruitflow.crud import job_position as position_crud
from recruitflow.models.job_position import JobPosition, JobPositionStatus
from recruitflow.models.user import User
from recruitflow.schemas.common import BulkActionResponse, IdListRequest
from recruitflow.schemas.job_position import (
    JobPositionCreateRequest,
    JobPositionResponse,
    JobPositionUpdateRequest,
)
from recruitflow.services import workflow

router = APIRouter(prefix="/job-positions", tags=["Job Positions"])
logger = logging.getLogger(__name__)


def _get_position_or_404(db: Session, position_id: int) -> JobPosition:
    position = position_crud.get_by_id(db, position_id)
    if not position:
        raise HTTPException(status_code=404, detail="Job position not found")
    return position


@router.get("", response_model=List[JobPositionResponse])
def list_job_positions(
    status: Optional[JobPositionStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List active (non-archived) positions, newest first."""
    return position_crud.get_multi(db, archived=False, status=status)


@router.post("", response_model=JobPositionResponse, status_code=201)
def create_job_position(
    position_data: JobPositionCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Request a new position.

    The position is stored as DRAFT with the caller as requester, waiting
    for Head HR approval.

    Raises:
        HTTPException 409: A position with this name already exists
        HTTPException 500: Database error
    """
    if position_crud.get_by_name(db, position_data.name):
        raise HTTPException(status_code=409, detail=f"Job position '{position_data.name}' already exists")

    try:
        position = position_crud.create(db, position_data, requested_by_id=current_user.id)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Job position '{position_data.name}' already exists")
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create job position: {e}")
        raise HTTPException(status_code=500, detail="Failed to create job position")

    logger.info(f"Job position {position.id} requested by user {current_user.id}")
    return position


@router.get("/archived", response_model=List[JobPositionResponse])
def list_archived_job_positions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return position_crud.get_multi(db, archived=True)


@router.put("/archive", response_model=BulkActionResponse)
def archive_job_positions(
    request: IdListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    """Archive positions. Only CLOSED positions are affected."""
    count = position_crud.archive(db, request.ids)
    return BulkActionResponse(message=f"{count} job position(s) archived", affected_count=count)


@router.put("/unarchive", response_model=BulkActionResponse)
def unarchive_job_positions(
    request: IdListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    count = position_crud.unarchive(db, request.ids)
    return BulkActionResponse(message=f"{count} job position(s) restored", affected_count=count)


@router.get("/{position_id}", response_model=JobPositionResponse)
def get_job_position(
    position_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _get_position_or_404(db, position_id)


@router.put("/{position_id}", response_model=JobPositionResponse)
def update_job_position(
    position_id: int,
    update_data: JobPositionUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Edit a position and/or move it through its lifecycle.

    Publishing (APPROVED -> OPEN) needs both registration dates. The
    resulting window (new values over stored ones) must not end before
    it starts, whatever the status.

    Raises:
        HTTPException 400: Unknown status, inverted window, or publishing without one
        HTTPException 403: Caller's role may not make this status change
        HTTPException 404: Position not found
        HTTPException 409: Illegal status change, or duplicate name
    """
    position = _get_position_or_404(db, position_id)
    changes = update_data.model_dump(exclude_unset=True)

    # Explicit nulls on required fields mean "leave unchanged"
    for field in ("name", "available_slots", "status"):
        if field in changes and changes[field] is None:
            changes.pop(field)

    start = changes.get("registration_start_date", position.registration_start_date)
    end = changes.get("registration_end_date", position.registration_end_date)
    dates_changed = "registration_start_date" in changes or "registration_end_date" in changes
    if dates_changed and start and end and end < start:
        raise HTTPException(status_code=400, detail="registration_end_date must not be before registration_start_date")

    new_status = changes.get("status")
    if new_status is not None:
        try:
            workflow.check_job_position_transition(position.status, new_status, current_user.role)
        except workflow.WorkflowError as e:
            raise_for_workflow_error(e)

        if new_status == JobPositionStatus.OPEN.value and position.status != JobPositionStatus.OPEN.value:
            if not start or not end:
                raise HTTPException(status_code=400, detail="Registration dates are required to publish a position")

    if changes.get("name") and changes["name"] != position.name:
        existing = position_crud.get_by_name(db, changes["name"])
        if existing and existing.id != position.id:
            raise HTTPException(status_code=409, detail=f"Job position '{changes['name']}' already exists")

    previous_status = position.status
    try:
        position = position_crud.update(db, position, changes)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update job position {position_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update job position")

    if position.status != previous_status:
        logger.info(f"Job position {position.id}: {previous_status} -> {position.status} by user {current_user.id}")
    return position


@router.delete("/{position_id}", status_code=204)
def delete_job_position(
    position_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    """Delete a position. Its applications remain, detached from it."""
    position = _get_position_or_404(db, position_id)
    position_crud.delete(db, position)
    logger.info(f"Job position {position_id} deleted by user {current_user.id}")
    return None
