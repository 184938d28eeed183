"""
Authentication endpoints.

- POST /login: exchange email/password for a JWT
- GET /me: current user profile
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session

from recruitflow.core.database import get_db
from recruitflow.core.deps import get_current_user
from recruitflow.core.security import verify_password, create_access_token
from recruitflow.crud import user as user_crud
from recruitflow.models.user import User
from recruitflow.schemas.user import LoginRequest, LoginResponse, UserResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate with email and password.

    The token lives 30 days, or 90 days when remember_me is set.
    Claims: sub (user id), email, role.

    Raises:
        HTTPException 401: Unknown email or wrong password
    """
    user = user_crud.get_by_email(db, request.email)
    if not user or not verify_password(request.password, user.hashed_password):
        logger.warning(f"Failed login attempt for {request.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token(
        {"sub": str(user.id), "email": user.email, "role": user.role},
        remember_me=request.remember_me,
    )

    logger.info(f"User {user.id} logged in (remember_me={request.remember_me})")
    return LoginResponse(
        message="Login successful",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user: User = Depends(get_current_user)):
    """Get the profile of the authenticated user."""
    return current_user
