"""
CRUD operations for job positions.
"""

from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from recruitflow.models.job_position import JobPosition, JobPositionStatus
from recruitflow.schemas.job_position import JobPositionCreateRequest


def create(db: Session, data: JobPositionCreateRequest, requested_by_id: Optional[int]) -> JobPosition:
    """
    Create a requisition. Status is always DRAFT and the position is never
    archived on creation.
    """
    position = JobPosition(
        name=data.name,
        location=data.location,
        registration_start_date=data.registration_start_date,
        registration_end_date=data.registration_end_date,
        specific_requirements=data.specific_requirements,
        available_slots=data.available_slots,
        announcement=data.announcement,
        status=JobPositionStatus.DRAFT.value,
        is_archived=False,
        requested_by_id=requested_by_id,
    )
    db.add(position)
    db.commit()
    db.refresh(position)
    return position


def get_by_id(db: Session, position_id: int) -> Optional[JobPosition]:
    return db.query(JobPosition).filter(JobPosition.id == position_id).first()


def get_by_name(db: Session, name: str) -> Optional[JobPosition]:
    return db.query(JobPosition).filter(JobPosition.name == name).first()


def get_multi(
    db: Session,
    archived: bool = False,
    status: Optional[JobPositionStatus] = None
) -> List[JobPosition]:
    query = db.query(JobPosition).filter(JobPosition.is_archived == archived)
    if status:
        query = query.filter(JobPosition.status == status.value)
    return query.order_by(JobPosition.created_at.desc()).all()


def _open_filter(query, now: datetime):
    return query.filter(
        JobPosition.status == JobPositionStatus.OPEN.value,
        JobPosition.is_archived.is_(False),
        or_(JobPosition.registration_start_date.is_(None), JobPosition.registration_start_date <= now),
        or_(JobPosition.registration_end_date.is_(None), JobPosition.registration_end_date >= now),
    )


def get_open(db: Session, now: Optional[datetime] = None) -> List[JobPosition]:
    """Positions currently shown on the careers page."""
    query = _open_filter(db.query(JobPosition), now or datetime.utcnow())
    return query.order_by(JobPosition.registration_end_date.asc()).all()


def count_open(db: Session, now: Optional[datetime] = None) -> int:
    return _open_filter(db.query(JobPosition), now or datetime.utcnow()).count()


def update(db: Session, position: JobPosition, changes: dict) -> JobPosition:
    for field, value in changes.items():
        if isinstance(value, JobPositionStatus):
            value = value.value
        setattr(position, field, value)
    db.commit()
    db.refresh(position)
    return position


def delete(db: Session, position: JobPosition) -> None:
    """Delete a position; its applications are kept with no position."""
    db.delete(position)
    db.commit()


def archive(db: Session, ids: List[int]) -> int:
    """Archive CLOSED positions among ids. Returns how many were archived."""
    count = (
        db.query(JobPosition)
        .filter(
            JobPosition.id.in_(ids),
            JobPosition.status == JobPositionStatus.CLOSED.value,
            JobPosition.is_archived.is_(False),
        )
        .update({JobPosition.is_archived: True}, synchronize_session=False)
    )
    db.commit()
    return count


def unarchive(db: Session, ids: List[int]) -> int:
    count = (
        db.query(JobPosition)
        .filter(JobPosition.id.in_(ids), JobPosition.is_archived.is_(True))
        .update({JobPosition.is_archived: False}, synchronize_session=False)
    )
    db.commit()
    return count


def status_distribution(db: Session) -> Dict[str, int]:
    """Position count per status, every status present."""
    distribution = {status.value: 0 for status in JobPositionStatus}
    rows = db.query(JobPosition.status, func.count(JobPosition.id)).group_by(JobPosition.status).all()
    for status, count in rows:
        if status in distribution:
            distribution[status] = count
    return distribution
