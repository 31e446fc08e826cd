"""
Notification service: creating, listing and acknowledging notifications.
"""

from typing import Any, List, Optional

from sqlmodel import Session, col, select

from taskerai.core.exceptions import NotFoundError
from taskerai.core.logging import get_logger
from taskerai.models.notification import Notification, NotificationType

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 50


class NotificationService:
    """Service class for notification operations."""

    @staticmethod
    def create(
        session: Session,
        receiver_id: int,
        notification_type: NotificationType,
        data: Optional[dict[str, Any]] = None,
        commit: bool = True,
    ) -> Notification:
        """
        Create a notification for one receiver.

        Args:
            session: Database session
            receiver_id: ID of the user to notify
            notification_type: Kind of notification
            data: JSON payload
            commit: Commit immediately; pass False to let the caller commit

        Returns:
            The notification instance
        """
        notification = Notification(
            receiver_id=receiver_id,
            type=notification_type,
            data=data or {},
        )
        session.add(notification)
        if commit:
            session.commit()
            session.refresh(notification)
        logger.debug(f"Queued {notification_type.value} notification for user {receiver_id}")
        return notification

    @staticmethod
    def list_for_user(session: Session, user_id: int, limit: int = DEFAULT_LIST_LIMIT) -> List[Notification]:
        """Latest notifications for a user, newest first."""
        statement = (
            select(Notification)
            .where(Notification.receiver_id == user_id)
            .order_by(col(Notification.created_at).desc(), col(Notification.id).desc())
            .limit(limit)
        )
        return list(session.exec(statement))

    @staticmethod
    def mark_read(session: Session, notification_id: int, user_id: int) -> Notification:
        """
        Mark a notification as read.
        Notifications addressed to someone else are reported as missing.

        Raises:
            NotFoundError: If the notification does not exist for this user
        """
        notification = session.get(Notification, notification_id)
        if notification is None or notification.receiver_id != user_id:
            raise NotFoundError("Notification not found")
        notification.read = True
        session.add(notification)
        session.commit()
        session.refresh(notification)
        return notification
