"""
CRUD operations for staff accounts.
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from recruitflow.core.security import get_password_hash
from recruitflow.models.user import User, UserRole
from recruitflow.schemas.user import UserCreateRequest

logger = logging.getLogger(__name__)


def get_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def get_multi(db: Session, role: Optional[UserRole] = None) -> List[User]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role.value)
    return query.order_by(User.name.asc()).all()


def count_by_role(db: Session, role: UserRole) -> int:
    return db.query(User).filter(User.role == role.value).count()


def create(db: Session, user_data: UserCreateRequest) -> User:
    """
    Create a staff account with a hashed password.

    Args:
        db: Database session
        user_data: Validated data (department already normalized per role)

    Returns:
        Created User instance
    """
    user = User(
        name=user_data.name,
        email=user_data.email.lower(),
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role.value,
        department=user_data.department,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Created user {user.id} ({user.role})")
    return user


def update(db: Session, user: User, changes: dict) -> User:
    """
    Apply already-validated changes. A "password" key is hashed first.
    """
    if "password" in changes:
        user.hashed_password = get_password_hash(changes.pop("password"))
    if "email" in changes:
        changes["email"] = changes["email"].lower()
    if "role" in changes and isinstance(changes["role"], UserRole):
        changes["role"] = changes["role"].value

    for field, value in changes.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user


def delete(db: Session, user: User) -> None:
    """Delete a user. Positions they requested keep existing with no requester."""
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id}")


def ensure_head_hr(db: Session, email: str, password: str, name: str) -> User:
    """
    Create the initial Head HR account unless that email already exists.

    Returns:
        The existing or newly created user
    """
    existing = get_by_email(db, email)
    if existing:
        return existing

    return create(db, UserCreateRequest(
        name=name,
        email=email,
        password=password,
        role=UserRole.HEAD_HR,
    ))
