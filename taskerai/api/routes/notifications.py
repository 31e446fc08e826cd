"""
Notification routes for the authenticated user's inbox.
"""

from fastapi import APIRouter

from taskerai.api.deps import CurrentUser, SessionDep
from taskerai.schemas.notification import NotificationListResponse, NotificationResponse
from taskerai.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
def list_notifications(current_user: CurrentUser, session: SessionDep) -> NotificationListResponse:
    """Latest notifications addressed to the caller, newest first."""
    notifications = NotificationService.list_for_user(session, current_user.id)  # type: ignore[arg-type]
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications]
    )


@router.put("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: int, current_user: CurrentUser, session: SessionDep
) -> NotificationResponse:
    notification = NotificationService.mark_read(session, notification_id, current_user.id)  # type: ignore[arg-type]
    return NotificationResponse.model_validate(notification)
