"""
HR endpoints for CV applications.

Covers the candidate pipeline (status changes, analysis results, interview
scheduling), the ranking board, archiving and CV file access.
"""

import io
import logging
import zipfile
from datetime import date, datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Optional

from recruitflow.core.config import settings
from recruitflow.core.database import get_db
from recruitflow.core.deps import get_current_user, get_hr_staff, raise_for_workflow_error
from recruitflow.core.storage import StorageError, delete_quietly, get_content_type, storage
from recruitflow.crud import cv_application as application_crud
from recruitflow.crud import schedule as schedule_crud
from recruitflow.models.cv_application import CvApplication, ApplicationStatus
from recruitflow.models.user import User
from recruitflow.schemas.common import BulkActionResponse, IdListRequest
from recruitflow.schemas.cv_application import (
    AnalysisResultRequest,
    ApplicationResponse,
    StatusUpdateRequest,
    TriggerScheduleRequest,
    TriggerScheduleResponse,
)
from recruitflow.services import workflow
from recruitflow.services.email_service import EmailDeliveryError, email_service

router = APIRouter(prefix="/applications", tags=["Applications"])
logger = logging.getLogger(__name__)

SCHEDULE_TITLES = {
    "manager": "Manager Interview",
    "final_hr": "Final HR Interview",
    "onboarding": "Onboarding",
}

# Note keys per schedule type, so later stages do not overwrite earlier ones
SCHEDULE_NOTE_PREFIXES = {
    "manager": "",
    "final_hr": "final_",
    "onboarding": "onboarding_",
}


def _get_application_or_404(db: Session, application_id: int) -> CvApplication:
    application = application_crud.get_by_id(db, application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


def _stream_cv(application: CvApplication, disposition: str) -> StreamingResponse:
    try:
        content = storage.download_file(application.cv_file_object_key)
    except StorageError as e:
        logger.error(f"CV file missing for application {application.id}: {e}")
        raise HTTPException(status_code=404, detail="CV file not found")

    return StreamingResponse(
        content,
        media_type=get_content_type(application.cv_file_name),
        headers={"Content-Disposition": f'{disposition}; filename="{application.cv_file_name}"'},
    )


@router.get("", response_model=List[ApplicationResponse])
def list_applications(
    status: Optional[ApplicationStatus] = None,
    position_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List active (non-archived) applications, newest first."""
    return application_crud.get_multi(db, archived=False, status=status, position_id=position_id)


@router.get("/ranking", response_model=List[ApplicationResponse])
def rank_applications(
    search_term: Optional[str] = None,
    qualification: Optional[str] = None,
    date: Optional[date] = Query(None, description="Submission day, YYYY-MM-DD"),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Top analysed candidates by similarity score.

    Args:
        search_term: Case-insensitive match on name, email or qualification
        qualification: Exact qualification (position name)
        date: Only applications submitted that day
        limit: Maximum rows (default 10)
    """
    return application_crud.get_ranked(
        db,
        search_term=search_term,
        qualification=qualification,
        on_date=date,
        limit=limit,
    )


@router.get("/archived", response_model=List[ApplicationResponse])
def list_archived_applications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return application_crud.get_multi(db, archived=True)


@router.put("/archive", response_model=BulkActionResponse)
def archive_applications(
    request: IdListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    """Archive finished applications (STAFF_REJECTED, NOT_HIRED, ONBOARDING). Others are skipped."""
    count = application_crud.archive(db, request.ids)
    return BulkActionResponse(message=f"{count} application(s) archived", affected_count=count)


@router.put("/unarchive", response_model=BulkActionResponse)
def unarchive_applications(
    request: IdListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    count = application_crud.unarchive(db, request.ids)
    return BulkActionResponse(message=f"{count} application(s) restored", affected_count=count)


@router.post("/bulk-delete-active", response_model=BulkActionResponse)
def bulk_delete_active_applications(
    request: IdListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    """Delete active applications among ids together with their CV files."""
    applications = application_crud.get_by_ids(db, request.ids, archived=False)
    object_keys = [a.cv_file_object_key for a in applications]

    count = application_crud.delete_many(db, applications)
    for key in object_keys:
        delete_quietly(key)

    logger.info(f"User {current_user.id} deleted {count} active application(s)")
    return BulkActionResponse(message=f"{count} application(s) deleted", affected_count=count)


@router.post("/bulk-download")
def bulk_download_cvs(
    request: IdListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Download the selected CVs as one zip archive.

    Files missing from storage are skipped.

    Raises:
        HTTPException 404: None of the selected CVs could be read
    """
    applications = application_crud.get_by_ids(db, request.ids)

    buffer = io.BytesIO()
    added = 0
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for application in applications:
            try:
                content = storage.download_file(application.cv_file_object_key)
            except StorageError as e:
                logger.warning(f"Skipping CV of application {application.id}: {e}")
                continue
            archive.writestr(f"{application.id}_{application.cv_file_name}", content.getvalue())
            added += 1

    if added == 0:
        raise HTTPException(status_code=404, detail="No CV files found for the selected applications")

    buffer.seek(0)
    zip_name = f"selected_cvs_{datetime.now():%Y%m%d_%H%M%S}.zip"
    return StreamingResponse(
        buffer,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{zip_name}"'},
    )


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _get_application_or_404(db, application_id)


@router.delete("/{application_id}", status_code=204)
def delete_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    """Delete an application and its CV file."""
    application = _get_application_or_404(db, application_id)
    object_key = application.cv_file_object_key

    application_crud.delete(db, application)
    delete_quietly(object_key)
    logger.info(f"Application {application_id} deleted by user {current_user.id}")
    return None


@router.get("/{application_id}/download-cv")
def download_cv(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _stream_cv(_get_application_or_404(db, application_id), "attachment")


@router.get("/{application_id}/view-cv")
def view_cv(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _stream_cv(_get_application_or_404(db, application_id), "inline")


@router.put("/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: int,
    update_data: StatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Move an application through the pipeline and/or record interview notes.

    interview_notes are merged into the stored notes (new keys win). When
    no status is sent, a manager_decision ("Hire"/"Reject") or
    final_decision ("HIRED"/"NOT_HIRED") in the notes selects the next
    status.

    Raises:
        HTTPException 400: Nothing to update, or unknown status
        HTTPException 403: Caller's role may not make this move
        HTTPException 404: Application not found
        HTTPException 409: Move not allowed from the current status
    """
    if update_data.status is None and update_data.interview_notes is None:
        raise HTTPException(status_code=400, detail="Provide a status and/or interview_notes")

    application = _get_application_or_404(db, application_id)
    current_status = application.status

    if update_data.status is not None:
        target = update_data.status
    else:
        target = workflow.derive_status_from_notes(current_status, update_data.interview_notes)

    if target is not None and target != current_status:
        try:
            workflow.check_application_transition(current_status, target, current_user.role)
        except workflow.WorkflowError as e:
            raise_for_workflow_error(e)
        application.status = target

    if update_data.interview_notes is not None:
        application.interview_notes = workflow.merge_interview_notes(
            application.interview_notes,
            workflow.stamp_decision_date(update_data.interview_notes)
        )

    try:
        db.commit()
        db.refresh(application)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update application {application_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update application")

    if application.status != current_status:
        logger.info(f"Application {application_id}: {current_status} -> {application.status} by user {current_user.id}")
    return application


@router.post("/{application_id}/process-result", response_model=ApplicationResponse)
def process_analysis_result(
    application_id: int,
    result: AnalysisResultRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_staff)
):
    """
    Store the external CV analysis result.

    A SUBMITTED application becomes REVIEWED. Applications further along
    keep their status; only the analysis fields are refreshed.

    Restricted to HR accounts: the analysis workflow authenticates as a
    Staff HR service account, so managers cannot overwrite scores.
    """
    application = _get_application_or_404(db, application_id)

    for field, value in result.model_dump(exclude_unset=True).items():
        setattr(application, field, value)

    if application.status == ApplicationStatus.SUBMITTED.value:
        workflow.check_application_transition(
            application.status, ApplicationStatus.REVIEWED.value, workflow.SYSTEM
        )
        application.status = ApplicationStatus.REVIEWED.value

    try:
        db.commit()
        db.refresh(application)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to save analysis for application {application_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save analysis result")

    logger.info(
        f"Analysis saved for application {application_id} "
        f"(similarity={result.similarity_score}, hard_gate={result.passed_hard_gate})"
    )
    return application


@router.post("/{application_id}/trigger-schedule", response_model=TriggerScheduleResponse)
def trigger_schedule(
    application_id: int,
    request: TriggerScheduleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Book a manager interview, final HR interview or onboarding session.

    Workflow:
    1. Check the application is at the stage this type schedules
    2. Validate the status transition for the caller's role
    3. Refuse slots that overlap an existing calendar entry
    4. Create the linked schedule, update status and interview notes
    5. Email the invite; if it fails nothing is saved

    Raises:
        HTTPException 400: End time not after start time
        HTTPException 403: Caller's role may not schedule this stage
        HTTPException 404: Application not found
        HTTPException 409: Wrong stage, or slot already taken
        HTTPException 502: Invite email could not be sent
    """
    application = _get_application_or_404(db, application_id)
    required_status, target_status = workflow.SCHEDULE_TYPES[request.type]

    if application.status != required_status:
        raise HTTPException(
            status_code=409,
            detail=f"Application must be {required_status} to schedule a {request.type} session (is {application.status})"
        )

    try:
        workflow.check_application_transition(application.status, target_status, current_user.role)
    except workflow.WorkflowError as e:
        raise_for_workflow_error(e)

    start = request.date_time
    end = request.end_time or start + timedelta(minutes=settings.DEFAULT_INTERVIEW_MINUTES)
    if end <= start:
        raise HTTPException(status_code=400, detail="end_time must be after date_time")

    clash = schedule_crud.find_overlapping(db, start, end)
    if clash:
        raise HTTPException(
            status_code=409,
            detail=f"Slot overlaps '{clash.title}' ({clash.start_date.isoformat()} - {clash.end_date.isoformat()})"
        )

    previous_status = application.status
    schedule = schedule_crud.create(
        db,
        title=f"{SCHEDULE_TITLES[request.type]}: {application.full_name}",
        start_date=start,
        end_date=end,
        description=request.notes_from_hr,
        application_id=application.id,
        commit=False,
    )

    prefix = SCHEDULE_NOTE_PREFIXES[request.type]
    note_updates = {
        f"{prefix}scheduled_time": start.isoformat(),
        f"{prefix}scheduled_end_time": end.isoformat(),
        "interview_type": request.type,
    }
    for key in ("preference", "notes_from_hr", "schedule_link"):
        value = getattr(request, key)
        if value is not None:
            note_updates[key] = value

    application.interview_notes = workflow.merge_interview_notes(application.interview_notes, note_updates)
    application.status = target_status
    db.flush()

    position_name = application.applied_position.name if application.applied_position else application.qualification
    try:
        email_service.send_interview_invite(
            to_email=application.email,
            candidate_name=application.full_name,
            position_name=position_name,
            interview_type=request.type,
            start=start,
            end=end,
            notes=request.notes_from_hr,
            schedule_link=request.schedule_link,
        )
    except EmailDeliveryError as e:
        db.rollback()
        logger.error(f"Invite for application {application_id} failed, schedule not saved: {e}")
        raise HTTPException(status_code=502, detail="Interview invite could not be sent; nothing was scheduled")

    db.commit()
    db.refresh(application)
    logger.info(
        f"Application {application_id}: {previous_status} -> {target_status}, "
        f"schedule {schedule.id} by user {current_user.id}"
    )

    return TriggerScheduleResponse(
        message="Schedule saved and invitation sent",
        application=ApplicationResponse.model_validate(application),
        schedule_id=schedule.id,
    )
