"""
Promotion workflow: an OWNER changing another user's role.

All checks run before the single field write, so a rejected promotion leaves
the target untouched.
"""

from sqlmodel import Session

from taskerai.core.exceptions import ForbiddenError
from taskerai.core.logging import get_logger
from taskerai.models.notification import NotificationType
from taskerai.models.user import User, UserRole, parse_role, utcnow
from taskerai.services.authorization import can_promote_to, can_promote_users
from taskerai.services.notification_service import NotificationService
from taskerai.services.user_service import UserService

logger = get_logger(__name__)


class PromotionService:
    """Service class for role changes."""

    @staticmethod
    def promote(session: Session, actor: User, user_id: int, new_role: str | UserRole) -> User:
        """
        Give ``user_id`` the role ``new_role``.

        Args:
            session: Database session
            actor: Authenticated user requesting the change
            user_id: Target user ID
            new_role: Raw role name from the request

        Returns:
            The updated user

        Raises:
            ForbiddenError: If the actor is not OWNER, targets themself, targets
                the OWNER, or asks for a role they cannot grant
            BadRequestError: If ``new_role`` is not a known role
            NotFoundError: If the target does not exist
        """
        if not can_promote_users(actor.role):
            logger.warning(f"User {actor.id} ({actor.role.value}) attempted to promote user {user_id}")
            raise ForbiddenError("Only Owner can promote users", code="INSUFFICIENT_ROLE")

        role = parse_role(new_role)

        if not can_promote_to(actor.role, role):
            logger.warning(f"User {actor.id} attempted to promote user {user_id} to {role.value}")
            raise ForbiddenError("Cannot promote to this role")

        if user_id == actor.id:
            logger.warning(f"User {actor.id} attempted to change their own role")
            raise ForbiddenError("Cannot change your own role", code="SELF_PROMOTION")

        target = UserService.require(session, user_id)

        if target.role == UserRole.OWNER:
            raise ForbiddenError("Cannot change OWNER role")

        previous = target.role
        target.role = role
        target.updated_at = utcnow()
        session.add(target)
        NotificationService.create(
            session,
            receiver_id=target.id,  # type: ignore[arg-type]
            notification_type=NotificationType.ROLE_CHANGED,
            data={"previous_role": previous.value, "new_role": role.value},
            commit=False,
        )
        session.commit()
        session.refresh(target)

        logger.info(f"User {target.id} promoted from {previous.value} to {role.value} by {actor.id}")
        return target
