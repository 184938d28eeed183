"""
CRUD operations for calendar entries.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from recruitflow.models.schedule import Schedule


def create(
    db: Session,
    title: str,
    start_date: datetime,
    end_date: datetime,
    description: Optional[str] = None,
    application_id: Optional[int] = None,
    commit: bool = True
) -> Schedule:
    """
    Create a calendar entry.

    With commit=False the entry is only flushed, so the caller can still
    roll it back (used when an invite email must go out first).
    """
    schedule = Schedule(
        title=title,
        start_date=start_date,
        end_date=end_date,
        description=description,
        application_id=application_id,
    )
    db.add(schedule)
    if commit:
        db.commit()
        db.refresh(schedule)
    else:
        db.flush()
    return schedule


def get_by_id(db: Session, schedule_id: int) -> Optional[Schedule]:
    return db.query(Schedule).filter(Schedule.id == schedule_id).first()


def get_multi(
    db: Session,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> List[Schedule]:
    """Entries intersecting [start, end]; either bound may be omitted."""
    query = db.query(Schedule)
    if start:
        query = query.filter(Schedule.end_date >= start)
    if end:
        query = query.filter(Schedule.start_date <= end)
    return query.order_by(Schedule.start_date.asc()).all()


def find_overlapping(
    db: Session,
    start: datetime,
    end: datetime,
    exclude_id: Optional[int] = None
) -> Optional[Schedule]:
    """First entry sharing any time with [start, end); touching edges do not overlap."""
    query = db.query(Schedule).filter(Schedule.start_date < end, Schedule.end_date > start)
    if exclude_id is not None:
        query = query.filter(Schedule.id != exclude_id)
    return query.order_by(Schedule.start_date.asc()).first()


def update(db: Session, schedule: Schedule, changes: dict) -> Schedule:
    for field, value in changes.items():
        setattr(schedule, field, value)
    db.commit()
    db.refresh(schedule)
    return schedule


def delete(db: Session, schedule: Schedule) -> None:
    db.delete(schedule)
    db.commit()
