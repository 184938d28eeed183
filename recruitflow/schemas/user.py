"""
Pydantic schemas for staff accounts and authentication.
"""

from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional
from datetime import datetime

from recruitflow.models.user import UserRole


class UserCreateRequest(BaseModel):
    """Request schema for creating a staff account (Head HR only)."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)  # bcrypt limit
    role: UserRole
    department: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def check_department(self):
        """Managers must have a department; other roles never carry one."""
        if self.role == UserRole.MANAGER:
            if not self.department or not self.department.strip():
                raise ValueError("department is required for managers")
            self.department = self.department.strip()
        else:
            self.department = None
        return self


class UserUpdateRequest(BaseModel):
    """Partial update. Omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    role: Optional[UserRole] = None
    department: Optional[str] = Field(None, max_length=255)


class UserResponse(BaseModel):
    """User profile response (no sensitive data)."""
    id: int
    name: str
    email: str
    role: UserRole
    department: Optional[str] = None
    has_avatar: bool = False
    created_at: datetime

    class Config:
        from_attributes = True

    @model_validator(mode="before")
    @classmethod
    def fill_has_avatar(cls, data):
        if hasattr(data, "avatar_object_key"):
            return {
                "id": data.id,
                "name": data.name,
                "email": data.email,
                "role": data.role,
                "department": data.department,
                "has_avatar": bool(data.avatar_object_key),
                "created_at": data.created_at,
            }
        return data


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    remember_me: bool = False


class LoginResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: UserResponse
