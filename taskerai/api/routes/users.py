"""
User routes: account management, promotion and the approval queue.

Role requirements:
- list / create users: OWNER, CO_OWNER, MANAGER
- promote, approve, deny, view pending: OWNER only
- assignable users, own profile: any active user
"""

from fastapi import APIRouter, status

from taskerai.api.deps import CurrentUser, SessionDep
from taskerai.core.exceptions import ForbiddenError
from taskerai.core.logging import get_logger
from taskerai.schemas.user import (
    AdminUserCreate,
    MessageResponse,
    PromoteRequest,
    UserListResponse,
    UserMessageResponse,
    UserProfileUpdate,
    UserResponse,
)
from taskerai.services.authorization import can_manage_users
from taskerai.services.pending_user_service import PendingUserService
from taskerai.services.promotion_service import PromotionService
from taskerai.services.user_service import UserService

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _user_list(users) -> UserListResponse:
    return UserListResponse(users=[UserResponse.model_validate(u) for u in users])


@router.get("", response_model=UserListResponse)
def list_users(current_user: CurrentUser, session: SessionDep) -> UserListResponse:
    """List all users, newest first."""
    if not can_manage_users(current_user.role):
        logger.warning(f"User {current_user.id} ({current_user.role.value}) attempted to list users")
        raise ForbiddenError(
            "Only Manager, Co-Owner, or Owner can manage users", code="INSUFFICIENT_ROLE"
        )
    return _user_list(UserService.list_all(session))


@router.post("", response_model=UserMessageResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: AdminUserCreate, current_user: CurrentUser, session: SessionDep
) -> UserMessageResponse:
    """Create an already verified and active account."""
    user = UserService.admin_create(session, current_user, user_in)
    return UserMessageResponse(
        user=UserResponse.model_validate(user), message="User created successfully"
    )


@router.get("/me", response_model=UserResponse)
def get_current_user_profile(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.get("/pending", response_model=UserListResponse)
def list_pending_users(current_user: CurrentUser, session: SessionDep) -> UserListResponse:
    """Accounts waiting for approval, oldest first."""
    return _user_list(PendingUserService.list_pending(session, current_user))


@router.get("/assignable", response_model=UserListResponse)
def list_assignable_users(current_user: CurrentUser, session: SessionDep) -> UserListResponse:
    """
    Users the caller may assign work to.
    Only active, verified users at or below the caller's rank are returned.
    """
    return _user_list(UserService.list_assignable(session, current_user))


@router.post("/promote", response_model=UserMessageResponse)
def promote_user(
    body: PromoteRequest, current_user: CurrentUser, session: SessionDep
) -> UserMessageResponse:
    """Change another user's role (OWNER only)."""
    user = PromotionService.promote(session, current_user, body.user_id, body.new_role)
    return UserMessageResponse(
        user=UserResponse.model_validate(user),
        message=f"User promoted to {user.role.value}",
    )


@router.put("/{user_id}", response_model=UserResponse)
def update_profile(
    user_id: int, body: UserProfileUpdate, current_user: CurrentUser, session: SessionDep
) -> UserResponse:
    """Update the caller's own first and last name."""
    user = UserService.update_profile(session, current_user, user_id, body)
    return UserResponse.model_validate(user)


@router.post("/{user_id}/approve", response_model=UserMessageResponse)
def approve_user(user_id: int, current_user: CurrentUser, session: SessionDep) -> UserMessageResponse:
    user = PendingUserService.approve(session, current_user, user_id)
    return UserMessageResponse(
        user=UserResponse.model_validate(user), message="User approved successfully"
    )


@router.post("/{user_id}/deny", response_model=MessageResponse)
def deny_user(user_id: int, current_user: CurrentUser, session: SessionDep) -> MessageResponse:
    PendingUserService.deny(session, current_user, user_id)
    return MessageResponse(message="User denied and removed successfully")
