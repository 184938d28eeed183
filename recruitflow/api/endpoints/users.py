"""
Staff account management.

Head HR manages accounts; everyone can edit their own profile and photo.
"""

import logging
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Optional

from recruitflow.core.database import get_db
from recruitflow.core.deps import get_current_user, get_head_hr
from recruitflow.core.storage import StorageError, delete_quietly, get_content_type, storage
from recruitflow.crud import user as user_crud
from recruitflow.models.user import User, UserRole
from recruitflow.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)

AVATAR_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.webp')
MAX_AVATAR_BYTES = 2 * 1024 * 1024


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _ensure_can_edit(current_user: User, target: User) -> None:
    if current_user.id != target.id and current_user.role != UserRole.HEAD_HR.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only edit your own profile"
        )


def _is_last_head_hr(db: Session, user: User) -> bool:
    return (
        user.role == UserRole.HEAD_HR.value
        and user_crud.count_by_role(db, UserRole.HEAD_HR) <= 1
    )


@router.get("", response_model=List[UserResponse])
def list_users(
    role: Optional[UserRole] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_head_hr)
):
    """List staff accounts, optionally filtered by role."""
    return user_crud.get_multi(db, role=role)


@router.post("", response_model=UserResponse, status_code=201)
def create_user(
    user_data: UserCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_head_hr)
):
    """
    Create a staff account.

    Raises:
        HTTPException 409: Email already registered
        HTTPException 422: Invalid role, or manager without department
    """
    if user_crud.get_by_email(db, user_data.email):
        raise HTTPException(status_code=409, detail="Email already registered")

    user = user_crud.create(db, user_data)
    logger.info(f"User {user.id} created by {current_user.id}")
    return user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    target = _get_user_or_404(db, user_id)
    _ensure_can_edit(current_user, target)
    return target


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    update_data: UserUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Update a staff account.

    Users may edit themselves; Head HR may edit anyone. Only Head HR
    changes roles, and the last Head HR cannot be demoted.

    Raises:
        HTTPException 400: Demoting the last Head HR, or manager without department
        HTTPException 403: Editing someone else, or changing a role, without Head HR
        HTTPException 404: User not found
        HTTPException 409: Email taken by another account
    """
    target = _get_user_or_404(db, user_id)
    _ensure_can_edit(current_user, target)

    changes = update_data.model_dump(exclude_unset=True)

    new_role = changes.get("role")
    if new_role is not None and new_role.value != target.role:
        if current_user.role != UserRole.HEAD_HR.value:
            raise HTTPException(status_code=403, detail="Only Head HR can change roles")
        if _is_last_head_hr(db, target):
            raise HTTPException(status_code=400, detail="Cannot change the role of the last Head HR")

    if changes.get("email") and changes["email"].lower() != target.email:
        existing = user_crud.get_by_email(db, changes["email"])
        if existing and existing.id != target.id:
            raise HTTPException(status_code=409, detail="Email already registered")

    resulting_role = new_role.value if new_role is not None else target.role
    if resulting_role == UserRole.MANAGER.value:
        department = changes.get("department", target.department)
        if not department or not department.strip():
            raise HTTPException(status_code=400, detail="department is required for managers")
        changes["department"] = department.strip()
    else:
        changes["department"] = None

    # Explicit nulls on required fields mean "leave unchanged"
    for field in ("name", "email", "password", "role"):
        if field in changes and changes[field] is None:
            changes.pop(field)

    return user_crud.update(db, target, changes)


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_head_hr)
):
    """
    Delete a staff account. Positions they requested keep existing
    with no requester.

    Raises:
        HTTPException 400: Deleting yourself or the last Head HR
        HTTPException 404: User not found
    """
    target = _get_user_or_404(db, user_id)

    if target.id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    if _is_last_head_hr(db, target):
        raise HTTPException(status_code=400, detail="Cannot delete the last Head HR")

    avatar_key = target.avatar_object_key
    user_crud.delete(db, target)
    delete_quietly(avatar_key)
    return None


@router.put("/{user_id}/avatar", response_model=UserResponse)
def upload_avatar(
    user_id: int,
    photo: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Upload or replace a profile photo (png, jpg, jpeg, webp; max 2 MB)."""
    target = _get_user_or_404(db, user_id)
    _ensure_can_edit(current_user, target)

    if not photo.filename or not photo.filename.lower().endswith(AVATAR_EXTENSIONS):
        raise HTTPException(status_code=400, detail="Photo must be a PNG, JPG or WEBP image")

    contents = photo.file.read()
    if len(contents) > MAX_AVATAR_BYTES:
        raise HTTPException(status_code=413, detail="Photo exceeds 2 MB")
    photo.file.seek(0)

    try:
        new_key = storage.upload_file(photo.file, photo.filename, folder="avatars")
    except StorageError as e:
        logger.error(f"Avatar upload failed for user {target.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to store photo")

    old_key = target.avatar_object_key
    user = user_crud.update(db, target, {"avatar_object_key": new_key})
    delete_quietly(old_key)
    return user


@router.delete("/{user_id}/avatar", response_model=UserResponse)
def remove_avatar(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    target = _get_user_or_404(db, user_id)
    _ensure_can_edit(current_user, target)

    old_key = target.avatar_object_key
    user = user_crud.update(db, target, {"avatar_object_key": None})
    delete_quietly(old_key)
    return user


@router.get("/{user_id}/avatar")
def get_avatar(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Stream a user's profile photo."""
    target = _get_user_or_404(db, user_id)
    if not target.avatar_object_key:
        raise HTTPException(status_code=404, detail="User has no photo")

    try:
        content = storage.download_file(target.avatar_object_key)
    except StorageError:
        raise HTTPException(status_code=404, detail="Photo file not found")

    return StreamingResponse(content, media_type=get_content_type(target.avatar_object_key))
