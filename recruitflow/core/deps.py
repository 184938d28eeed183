"""
FastAPI dependencies for authentication and authorization.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from recruitflow.core.database import get_db
from recruitflow.core.security import decode_token
from recruitflow.models.user import User, UserRole
from recruitflow.services.workflow import InvalidTransitionError, TransitionNotPermittedError, WorkflowError

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Extract and validate the current user from the bearer JWT.

    Raises:
        HTTPException 401: If the token is missing, invalid or the user is gone
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        payload = decode_token(credentials.credentials)
        user_id = payload.get("sub")
        if user_id is None:
            raise credentials_exception
        user_id = int(user_id)
    except (JWTError, ValueError):
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    return user


def require_roles(*roles: UserRole):
    """
    Build a dependency that only lets the given roles through.

    Usage:
        @router.get("/users")
        def list_users(user: User = Depends(require_roles(UserRole.HEAD_HR))):
            ...

    Raises:
        HTTPException 403: If the current user's role is not allowed
    """
    allowed = {role.value for role in roles}

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action"
            )
        return user

    return dependency


get_head_hr = require_roles(UserRole.HEAD_HR)
get_hr_staff = require_roles(UserRole.HEAD_HR, UserRole.STAFF_HR)


def raise_for_workflow_error(error: WorkflowError) -> None:
    """Translate a rejected status write into the matching HTTP error."""
    if isinstance(error, TransitionNotPermittedError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    if isinstance(error, InvalidTransitionError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
