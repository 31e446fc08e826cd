"""
Invitation routes: a user manager invites an email address, the invitee
opens the link and creates a pending account.
"""

from fastapi import APIRouter, BackgroundTasks, status

from taskerai.api.deps import CurrentUser, SessionDep
from taskerai.core.config import settings
from taskerai.schemas.user import (
    InviteAccept,
    InviteSend,
    InviteSendResponse,
    InviteVerifyResponse,
    SignupResponse,
    UserResponse,
)
from taskerai.services.email_service import EmailService
from taskerai.services.pending_user_service import PendingUserService

router = APIRouter(prefix="/invite", tags=["invite"])


@router.post("/send", response_model=InviteSendResponse)
def send_invite(
    body: InviteSend,
    current_user: CurrentUser,
    session: SessionDep,
    background_tasks: BackgroundTasks,
) -> InviteSendResponse:
    """
    Email an invitation link.
    The link itself is echoed back only in debug mode.
    """
    token = PendingUserService.create_invite(session, current_user, body.email)
    EmailService.send_invite(body.email, current_user.full_name, token, background_tasks)
    return InviteSendResponse(
        message="Invite sent successfully",
        invite_link=EmailService.link("/invite", token) if settings.DEBUG else None,
    )


@router.get("/verify", response_model=InviteVerifyResponse)
def verify_invite(token: str) -> InviteVerifyResponse:
    return InviteVerifyResponse(email=PendingUserService.read_invite(token))


@router.post("/accept", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def accept_invite(body: InviteAccept, session: SessionDep) -> SignupResponse:
    user = PendingUserService.accept_invite(session, body)
    return SignupResponse(
        message="Account created successfully. Awaiting admin approval.",
        user=UserResponse.model_validate(user),
    )
