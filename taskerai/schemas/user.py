"""
User schemas for API request/response validation.
Separates internal models from API contracts using Pydantic.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator

from taskerai.core.security import password_problems
from taskerai.models.user import UserRole


def _check_password(value: str) -> str:
    failed = password_problems(value)
    if failed:
        raise ValueError(f"Password does not meet requirements: {', '.join(failed)}")
    return value


class UserBase(BaseModel):
    """Base user schema with common fields."""

    email: EmailStr
    first_name: str
    last_name: str

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("first_name", "last_name", mode="after")
    @classmethod
    def require_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class UserCreate(UserBase):
    """Schema for self-service signup."""

    password: str

    @field_validator("password", mode="after")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)


class AdminUserCreate(UserCreate):
    """Schema for an account created directly by a user manager."""

    role: UserRole = UserRole.EMPLOYEE


class UserProfileUpdate(BaseModel):
    """Schema for a user editing their own profile."""

    first_name: str
    last_name: str

    @field_validator("first_name", "last_name", mode="after")
    @classmethod
    def require_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class UserResponse(BaseModel):
    """
    Schema for user data in API responses.
    Excludes sensitive information like hashed_password.
    """

    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_verified: bool
    active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    users: List[UserResponse]


class UserMessageResponse(BaseModel):
    """A user plus a human-readable outcome."""

    user: UserResponse
    message: str


class PromoteRequest(BaseModel):
    """
    Body of a promotion request.
    ``new_role`` is kept as a raw string so unknown roles surface as a 400
    from the role parser rather than a schema error.
    """

    user_id: int
    new_role: str


class PasswordReset(BaseModel):
    token: str
    password: str

    @field_validator("password", mode="after")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class VerifyEmailRequest(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str
    success: bool = True


class SignupResponse(BaseModel):
    message: str
    user: UserResponse


class InviteSend(BaseModel):
    email: EmailStr

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class InviteSendResponse(BaseModel):
    message: str
    invite_link: Optional[str] = None


class InviteAccept(BaseModel):
    token: str
    password: str
    first_name: str
    last_name: str

    @field_validator("password", mode="after")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("first_name", "last_name", mode="after")
    @classmethod
    def require_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class InviteVerifyResponse(BaseModel):
    email: str
    valid: bool = True
