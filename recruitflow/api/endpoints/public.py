"""
Public careers-page endpoints (no authentication).

- GET /public/job-positions: positions currently accepting applications
- POST /applications: submit a CV for an open position
"""

import logging
import os
from datetime import datetime
from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, UploadFile
from pydantic import EmailStr
from sqlalchemy.orm import Session
from typing import List

from recruitflow.core.config import settings
from recruitflow.core.database import get_db
from recruitflow.core.storage import StorageError, delete_quietly, storage
from recruitflow.crud import cv_application as application_crud
from recruitflow.crud import job_position as position_crud
from recruitflow.schemas.cv_application import ApplicationSubmittedResponse
from recruitflow.schemas.job_position import PublicJobPositionResponse
from recruitflow.services.analysis_webhook import notify_new_application
from recruitflow.services.email_service import email_service

router = APIRouter(tags=["Public"])
logger = logging.getLogger(__name__)

ALLOWED_CV_EXTENSIONS = ('.pdf', '.doc', '.docx')


@router.get("/public/job-positions", response_model=List[PublicJobPositionResponse])
def list_open_positions(db: Session = Depends(get_db)):
    """Positions that are OPEN, not archived and inside their registration window."""
    return position_crud.get_open(db)


@router.post("/applications", response_model=ApplicationSubmittedResponse, status_code=201)
def submit_application(
    background_tasks: BackgroundTasks,
    full_name: str = Form(..., min_length=1, max_length=255),
    email: EmailStr = Form(...),
    applied_position_id: int = Form(...),
    agree_terms: bool = Form(...),
    cv_file: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """
    Submit a CV for an open position.

    Workflow:
    1. Validate terms, file type and size
    2. Check the position is accepting applications
    3. Reject a second active application from the same email
    4. Store the CV and create the application as SUBMITTED
    5. In the background: confirmation email and analysis hand-off

    Raises:
        HTTPException 400: Terms not agreed, bad file type, or position not open
        HTTPException 404: Position does not exist
        HTTPException 409: Already applied to this position
        HTTPException 413: File too large
        HTTPException 500: Storage or database failure
    """
    if not agree_terms:
        raise HTTPException(status_code=400, detail="You must agree to the terms to apply")

    filename = os.path.basename(cv_file.filename or "")
    if not filename.lower().endswith(ALLOWED_CV_EXTENSIONS):
        raise HTTPException(status_code=400, detail="CV must be a PDF, DOC or DOCX file")

    contents = cv_file.file.read()
    if len(contents) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"CV exceeds {settings.MAX_UPLOAD_SIZE_MB} MB")
    if not contents:
        raise HTTPException(status_code=400, detail="CV file is empty")
    cv_file.file.seek(0)

    position = position_crud.get_by_id(db, applied_position_id)
    if not position:
        raise HTTPException(status_code=404, detail="Job position not found")
    if not position.is_accepting_applications(datetime.utcnow()):
        raise HTTPException(status_code=400, detail=f"Position '{position.name}' is not open for applications")

    if application_crud.get_active_duplicate(db, email, position.id):
        raise HTTPException(status_code=409, detail="You have already applied for this position")

    try:
        object_key = storage.upload_file(cv_file.file, filename, folder="cvs")
    except StorageError as e:
        logger.error(f"Failed to store CV from {email}: {e}")
        raise HTTPException(status_code=500, detail="Failed to store CV file")

    try:
        application = application_crud.create(
            db,
            full_name=full_name.strip(),
            email=email,
            position_id=position.id,
            qualification=position.name,
            cv_file_name=filename,
            cv_file_object_key=object_key,
            agree_terms=True,
        )
    except Exception as e:
        db.rollback()
        delete_quietly(object_key)
        logger.error(f"Failed to save application from {email}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save application")

    logger.info(f"Application {application.id} submitted for position {position.id}")

    background_tasks.add_task(
        email_service.send_application_confirmation,
        application.email,
        application.full_name,
        position.name,
    )
    background_tasks.add_task(notify_new_application, application.id, object_key)

    return ApplicationSubmittedResponse(
        message="Application submitted successfully",
        application_id=application.id,
        status=application.status,
    )
