"""Pydantic schemas for request/response validation."""

from taskerai.schemas.notification import (
    CleanupResult,
    NotificationListResponse,
    NotificationResponse,
    PendingUsersInfo,
    PendingUserSummary,
)
from taskerai.schemas.token import Token, TokenPayload
from taskerai.schemas.user import (
    AdminUserCreate,
    ForgotPasswordRequest,
    InviteAccept,
    InviteSend,
    InviteSendResponse,
    InviteVerifyResponse,
    MessageResponse,
    PasswordReset,
    PromoteRequest,
    SignupResponse,
    UserCreate,
    UserListResponse,
    UserMessageResponse,
    UserProfileUpdate,
    UserResponse,
    VerifyEmailRequest,
)

__all__ = [
    "AdminUserCreate",
    "CleanupResult",
    "ForgotPasswordRequest",
    "InviteAccept",
    "InviteSend",
    "InviteSendResponse",
    "InviteVerifyResponse",
    "MessageResponse",
    "NotificationListResponse",
    "NotificationResponse",
    "PasswordReset",
    "PendingUserSummary",
    "PendingUsersInfo",
    "PromoteRequest",
    "SignupResponse",
    "Token",
    "TokenPayload",
    "UserCreate",
    "UserListResponse",
    "UserMessageResponse",
    "UserProfileUpdate",
    "UserResponse",
    "VerifyEmailRequest",
]
