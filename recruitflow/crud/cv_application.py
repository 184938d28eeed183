"""
CRUD operations for CV applications, including the ranking and
dashboard queries.
"""

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from recruitflow.models.cv_application import CvApplication, ApplicationStatus
from recruitflow.services.workflow import TERMINAL_APPLICATION_STATUSES

# Statuses shown on the ranking board (analysed and beyond)
RANKED_STATUSES = [
    ApplicationStatus.REVIEWED.value,
    ApplicationStatus.STAFF_APPROVED.value,
    ApplicationStatus.INTERVIEW_QUEUED.value,
    ApplicationStatus.INTERVIEW_SCHEDULED.value,
    ApplicationStatus.PENDING_FINAL_DECISION.value,
    ApplicationStatus.FINAL_INTERVIEW_SCHEDULED.value,
    ApplicationStatus.HIRED.value,
    ApplicationStatus.NOT_HIRED.value,
    ApplicationStatus.STAFF_REJECTED.value,
    ApplicationStatus.ONBOARDING.value,
]


def create(
    db: Session,
    full_name: str,
    email: str,
    position_id: int,
    qualification: str,
    cv_file_name: str,
    cv_file_object_key: str,
    agree_terms: bool
) -> CvApplication:
    application = CvApplication(
        full_name=full_name,
        email=email,
        applied_position_id=position_id,
        qualification=qualification,
        cv_file_name=cv_file_name,
        cv_file_object_key=cv_file_object_key,
        agree_terms=agree_terms,
        status=ApplicationStatus.SUBMITTED.value,
        is_archived=False,
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


def get_by_id(db: Session, application_id: int) -> Optional[CvApplication]:
    return (
        db.query(CvApplication)
        .options(joinedload(CvApplication.applied_position))
        .filter(CvApplication.id == application_id)
        .first()
    )


def get_active_duplicate(db: Session, email: str, position_id: int) -> Optional[CvApplication]:
    """An active application from the same email to the same position."""
    return (
        db.query(CvApplication)
        .filter(
            func.lower(CvApplication.email) == email.lower(),
            CvApplication.applied_position_id == position_id,
            CvApplication.is_archived.is_(False),
        )
        .first()
    )


def get_multi(
    db: Session,
    archived: bool = False,
    status: Optional[ApplicationStatus] = None,
    position_id: Optional[int] = None
) -> List[CvApplication]:
    query = (
        db.query(CvApplication)
        .options(joinedload(CvApplication.applied_position))
        .filter(CvApplication.is_archived == archived)
    )
    if status:
        query = query.filter(CvApplication.status == status.value)
    if position_id:
        query = query.filter(CvApplication.applied_position_id == position_id)
    return query.order_by(CvApplication.created_at.desc()).all()


def get_by_ids(db: Session, ids: Iterable[int], archived: Optional[bool] = None) -> List[CvApplication]:
    query = db.query(CvApplication).filter(CvApplication.id.in_(list(ids)))
    if archived is not None:
        query = query.filter(CvApplication.is_archived == archived)
    return query.all()


def get_ranked(
    db: Session,
    search_term: Optional[str] = None,
    qualification: Optional[str] = None,
    on_date: Optional[date] = None,
    limit: int = 10
) -> List[CvApplication]:
    """
    Best-matching analysed applications.

    Only non-archived rows with a similarity score are ranked, ordered by
    similarity_score then newest first.
    """
    query = (
        db.query(CvApplication)
        .options(joinedload(CvApplication.applied_position))
        .filter(
            CvApplication.is_archived.is_(False),
            CvApplication.similarity_score.isnot(None),
            CvApplication.status.in_(RANKED_STATUSES),
        )
    )

    if search_term:
        pattern = f"%{search_term.lower()}%"
        query = query.filter(or_(
            func.lower(CvApplication.full_name).like(pattern),
            func.lower(CvApplication.email).like(pattern),
            func.lower(CvApplication.qualification).like(pattern),
        ))
    if qualification:
        query = query.filter(CvApplication.qualification == qualification)
    if on_date:
        start_of_day = datetime.combine(on_date, datetime.min.time())
        query = query.filter(
            CvApplication.created_at >= start_of_day,
            CvApplication.created_at < start_of_day + timedelta(days=1),
        )

    return (
        query.order_by(CvApplication.similarity_score.desc(), CvApplication.created_at.desc())
        .limit(limit)
        .all()
    )


def archive(db: Session, ids: List[int]) -> int:
    """Archive finished applications among ids. Returns how many were archived."""
    count = (
        db.query(CvApplication)
        .filter(
            CvApplication.id.in_(ids),
            CvApplication.is_archived.is_(False),
            CvApplication.status.in_(list(TERMINAL_APPLICATION_STATUSES)),
        )
        .update({CvApplication.is_archived: True}, synchronize_session=False)
    )
    db.commit()
    return count


def unarchive(db: Session, ids: List[int]) -> int:
    count = (
        db.query(CvApplication)
        .filter(CvApplication.id.in_(ids), CvApplication.is_archived.is_(True))
        .update({CvApplication.is_archived: False}, synchronize_session=False)
    )
    db.commit()
    return count


def delete(db: Session, application: CvApplication) -> None:
    """Delete one application row. Linked schedules stay as plain entries."""
    db.delete(application)
    db.commit()


def delete_many(db: Session, applications: List[CvApplication]) -> int:
    for application in applications:
        db.delete(application)
    db.commit()
    return len(applications)


# Dashboard queries

def count_all(db: Session) -> int:
    return db.query(CvApplication).count()


def count_since(db: Session, since: datetime) -> int:
    return db.query(CvApplication).filter(CvApplication.created_at >= since).count()


def count_active_in_statuses(db: Session, statuses: Iterable[str]) -> int:
    return (
        db.query(CvApplication)
        .filter(CvApplication.status.in_(list(statuses)), CvApplication.is_archived.is_(False))
        .count()
    )


def status_distribution(db: Session) -> Dict[str, int]:
    """Active application count per status, every status present."""
    distribution = {status.value: 0 for status in ApplicationStatus}
    rows = (
        db.query(CvApplication.status, func.count(CvApplication.id))
        .filter(CvApplication.is_archived.is_(False))
        .group_by(CvApplication.status)
        .all()
    )
    for status, count in rows:
        if status in distribution:
            distribution[status] = count
    return distribution


def daily_submission_counts(db: Session, days: int = 7, today: Optional[date] = None) -> List[dict]:
    """
    Submissions per calendar day from `days` days ago through today,
    zero-filled, oldest first.
    """
    today = today or datetime.utcnow().date()
    first_day = today - timedelta(days=days)
    since = datetime.combine(first_day, datetime.min.time())

    counts: Dict[date, int] = {}
    for (created_at,) in db.query(CvApplication.created_at).filter(CvApplication.created_at >= since):
        day = created_at.date()
        counts[day] = counts.get(day, 0) + 1

    return [
        {"date": (first_day + timedelta(days=offset)).isoformat(),
         "count": counts.get(first_day + timedelta(days=offset), 0)}
        for offset in range(days + 1)
    ]


def get_recent(db: Session, limit: int = 5) -> List[CvApplication]:
    return (
        db.query(CvApplication)
        .filter(CvApplication.is_archived.is_(False))
        .order_by(CvApplication.created_at.desc())
        .limit(limit)
        .all()
    )
