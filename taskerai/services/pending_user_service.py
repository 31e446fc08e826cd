"""
Pending-user lifecycle: signup, email verification, invitations, approval,
denial and the age-based sweep of accounts nobody approved.

A pending user is any account with ``active=False``. Only an OWNER can move
one to active or delete it by hand; the sweep deletes the rest once they are
older than the TTL.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from sqlmodel import Session, col, select

from taskerai.core.config import settings
from taskerai.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from taskerai.core.logging import get_logger
from taskerai.core.security import TokenPurpose, create_purpose_token, decode_purpose_token
from taskerai.models.notification import NotificationType
from taskerai.models.user import User, UserRole, utcnow
from taskerai.schemas.user import InviteAccept, UserCreate
from taskerai.services.authorization import can_manage_users, can_promote_users
from taskerai.services.notification_service import NotificationService
from taskerai.services.user_service import UserService

logger = get_logger(__name__)

MIN_SWEEP_MINUTES = 1
# Ten years
MAX_SWEEP_MINUTES = 60 * 24 * 366 * 10


def clamp_sweep_minutes(duration_minutes: int) -> int:
    """Bound a requested TTL to [MIN_SWEEP_MINUTES, MAX_SWEEP_MINUTES]."""
    return min(MAX_SWEEP_MINUTES, max(MIN_SWEEP_MINUTES, duration_minutes))


class PendingUserService:
    """Service class for the signup-to-approval lifecycle."""

    @staticmethod
    def _notify_owner(session: Session, user: User) -> None:
        owner = UserService.get_owner(session)
        if owner is None:
            logger.warning(f"No OWNER to notify about new user {user.id}")
            return
        NotificationService.create(
            session,
            receiver_id=owner.id,  # type: ignore[arg-type]
            notification_type=NotificationType.NEW_USER_REQUEST,
            data={
                "new_user_id": user.id,
                "first_name": user.first_name,
                "last_name": user.last_name,
                "email": user.email,
            },
        )

    @staticmethod
    def _require_approver(actor: User, action: str) -> None:
        if not can_promote_users(actor.role):
            logger.warning(f"User {actor.id} ({actor.role.value}) attempted to {action} users")
            raise ForbiddenError(f"Only OWNER can {action} users", code="INSUFFICIENT_ROLE")

    @staticmethod
    def signup(session: Session, user_in: UserCreate) -> User:
        """
        Register a new EMPLOYEE awaiting verification and approval.

        Raises:
            ConflictError: If the email is already registered
        """
        user = UserService.create(session, user_in, role=UserRole.EMPLOYEE)
        logger.info(f"New signup: {user.email} (ID: {user.id})")
        PendingUserService._notify_owner(session, user)
        return user

    @staticmethod
    def verification_token(user: User) -> str:
        return create_purpose_token(
            TokenPurpose.VERIFY,
            {"sub": str(user.id)},
            timedelta(hours=settings.VERIFY_TOKEN_EXPIRE_HOURS),
        )

    @staticmethod
    def verify_email(session: Session, token: str) -> User:
        """
        Redeem an email verification token.
        Verification does not activate the account.

        Raises:
            BadRequestError: If the token is invalid or expired
            NotFoundError: If the user no longer exists
        """
        payload = decode_purpose_token(token, TokenPurpose.VERIFY)
        user = UserService.require(session, int(payload["sub"]))
        if user.is_verified:
            return user

        user.is_verified = True
        user.updated_at = utcnow()
        session.add(user)
        NotificationService.create(
            session,
            receiver_id=user.id,  # type: ignore[arg-type]
            notification_type=NotificationType.WELCOME,
            data={
                "title": f"Welcome to {settings.PROJECT_NAME}",
                "message": "Your email has been successfully verified.",
            },
            commit=False,
        )
        session.commit()
        session.refresh(user)
        logger.info(f"User {user.id} verified their email")
        return user

    @staticmethod
    def create_invite(session: Session, actor: User, email: str) -> str:
        """
        Issue an invitation token for ``email``.

        Raises:
            ForbiddenError: If the actor may not manage users
            ConflictError: If a verified account already uses the email
        """
        if not can_manage_users(actor.role):
            logger.warning(f"User {actor.id} ({actor.role.value}) attempted to send an invite")
            raise ForbiddenError("Only managers can send invites", code="INSUFFICIENT_ROLE")

        existing = UserService.get_by_email(session, email)
        if existing is not None and existing.is_verified:
            raise ConflictError("User already exists and is verified", code="EMAIL_EXISTS")

        logger.info(f"User {actor.id} invited {email.lower()}")
        return create_purpose_token(
            TokenPurpose.INVITE,
            {"email": email.lower(), "invited_by": actor.id},
            timedelta(hours=settings.INVITE_TOKEN_EXPIRE_HOURS),
        )

    @staticmethod
    def read_invite(token: str) -> str:
        """Return the invited email address carried by a valid invite token."""
        return decode_purpose_token(token, TokenPurpose.INVITE)["email"]

    @staticmethod
    def accept_invite(session: Session, invite: InviteAccept) -> User:
        """
        Create the account for an invitation.
        The address is considered confirmed since the token was mailed to it,
        but the account still awaits OWNER approval.

        Raises:
            BadRequestError: If the token is invalid or expired
            ConflictError: If the email is already registered
        """
        email = PendingUserService.read_invite(invite.token)
        user_in = UserCreate(
            email=email,
            password=invite.password,
            first_name=invite.first_name,
            last_name=invite.last_name,
        )
        user = UserService.create(session, user_in, role=UserRole.EMPLOYEE, is_verified=True)
        logger.info(f"Invite accepted: {user.email} (ID: {user.id})")
        PendingUserService._notify_owner(session, user)
        return user

    @staticmethod
    def approve(session: Session, actor: User, user_id: int) -> User:
        """
        Activate a pending user.

        Raises:
            ForbiddenError: If the actor is not OWNER
            NotFoundError: If the user does not exist
            ConflictError: If the user is already active
        """
        PendingUserService._require_approver(actor, "approve")
        user = UserService.require(session, user_id)
        if user.active:
            raise ConflictError("User is already approved", code="ALREADY_APPROVED")

        user.active = True
        user.updated_at = utcnow()
        session.add(user)
        NotificationService.create(
            session,
            receiver_id=user.id,  # type: ignore[arg-type]
            notification_type=NotificationType.ACCOUNT_APPROVED,
            data={"approved_by": actor.id},
            commit=False,
        )
        session.commit()
        session.refresh(user)
        logger.info(f"User {user.id} approved by {actor.id}")
        return user

    @staticmethod
    def deny(session: Session, actor: User, user_id: int) -> None:
        """
        Delete a user whose signup is refused.

        Raises:
            ForbiddenError: If the actor is not OWNER or the target is the OWNER
            NotFoundError: If the user does not exist
        """
        PendingUserService._require_approver(actor, "deny")
        user = UserService.require(session, user_id)
        if user.role == UserRole.OWNER:
            logger.warning(f"User {actor.id} attempted to deny OWNER account {user.id}")
            raise ForbiddenError("Cannot deny OWNER account")

        session.delete(user)
        session.commit()
        logger.info(f"User {user_id} denied and removed by {actor.id}")

    @staticmethod
    def pending_users(session: Session) -> List[User]:
        """Accounts awaiting approval, oldest first."""
        statement = (
            select(User)
            .where(User.active == False)  # noqa: E712
            .order_by(col(User.created_at), col(User.id))
        )
        return list(session.exec(statement))

    @staticmethod
    def list_pending(session: Session, actor: User) -> List[User]:
        """
        Accounts awaiting approval, for the OWNER's review queue.

        Raises:
            ForbiddenError: If the actor is not OWNER
        """
        PendingUserService._require_approver(actor, "view pending")
        return PendingUserService.pending_users(session)

    @staticmethod
    def sweep(session: Session, duration_minutes: int, now: Optional[datetime] = None) -> int:
        """
        Delete every inactive user created more than ``duration_minutes`` ago.
        Safe to run repeatedly; a second run over the same rows deletes nothing.

        Args:
            session: Database session
            duration_minutes: Age after which a pending user is removed, clamped
                with ``clamp_sweep_minutes``
            now: Reference time, defaults to the current UTC time

        Returns:
            Number of users deleted
        """
        duration = clamp_sweep_minutes(duration_minutes)
        cutoff = (now or utcnow()) - timedelta(minutes=duration)
        statement = (
            select(User)
            .where(User.active == False)  # noqa: E712
            .where(User.created_at < cutoff)
        )
        stale = list(session.exec(statement))
        for user in stale:
            session.delete(user)
        session.commit()

        if stale:
            logger.info(
                f"Sweep deleted {len(stale)} pending users older than {duration} minutes "
                f"(cutoff {cutoff.isoformat()})"
            )
        return len(stale)
