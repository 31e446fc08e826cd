"""
User service layer implementing business logic for user operations.
Separates business logic from API routes and database operations.
"""

import hashlib
from datetime import timedelta
from typing import List, Optional

from sqlmodel import Session, col, select

from taskerai.core.config import settings
from taskerai.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from taskerai.core.logging import get_logger
from taskerai.core.security import (
    TokenPurpose,
    create_purpose_token,
    decode_purpose_token,
    get_password_hash,
    verify_password,
)
from taskerai.models.user import User, UserRole, utcnow
from taskerai.schemas.user import AdminUserCreate, UserCreate, UserProfileUpdate
from taskerai.services.authorization import can_create_with_role, can_manage_users, filter_assignable

logger = get_logger(__name__)


def password_fingerprint(user: User) -> str:
    """Short digest of the stored hash; it changes whenever the password does."""
    return hashlib.sha256(user.hashed_password.encode("utf-8")).hexdigest()[:16]


class UserService:
    """Service class for user-related operations."""

    @staticmethod
    def get_by_email(session: Session, email: str) -> Optional[User]:
        """
        Retrieve a user by email address, case-insensitively.

        Args:
            session: Database session
            email: Email address to search for

        Returns:
            User if found, None otherwise
        """
        statement = select(User).where(User.email == email.strip().lower())
        return session.exec(statement).first()

    @staticmethod
    def get_by_id(session: Session, user_id: int) -> Optional[User]:
        return session.get(User, user_id)

    @staticmethod
    def require(session: Session, user_id: int) -> User:
        """
        Retrieve a user by ID or fail.

        Raises:
            NotFoundError: If no such user exists
        """
        user = session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def get_owner(session: Session) -> Optional[User]:
        """The OWNER account, lowest id first should more than one exist."""
        statement = select(User).where(User.role == UserRole.OWNER).order_by(col(User.id))
        return session.exec(statement).first()

    @staticmethod
    def create(
        session: Session,
        user_create: UserCreate,
        role: UserRole = UserRole.EMPLOYEE,
        is_verified: bool = False,
        active: bool = False,
    ) -> User:
        """
        Create a new user with hashed password.

        Args:
            session: Database session
            user_create: User creation data
            role: Initial role (defaults to EMPLOYEE)
            is_verified: Whether the email counts as confirmed
            active: Whether the account may log in

        Returns:
            Created user instance

        Raises:
            ConflictError: If the email is already registered
        """
        email = user_create.email.lower()
        if UserService.get_by_email(session, email) is not None:
            raise ConflictError("User with this email already exists", code="EMAIL_EXISTS")

        db_user = User(
            email=email,
            hashed_password=get_password_hash(user_create.password),
            first_name=user_create.first_name,
            last_name=user_create.last_name,
            role=role,
            is_verified=is_verified,
            active=active,
        )
        session.add(db_user)
        session.commit()
        session.refresh(db_user)
        return db_user

    @staticmethod
    def admin_create(session: Session, actor: User, user_in: AdminUserCreate) -> User:
        """
        Create an account on behalf of a user manager.
        Such accounts skip email confirmation and approval.

        Raises:
            ForbiddenError: If the actor may not create users, or not at that role
            ConflictError: If the email is already registered
        """
        if not can_manage_users(actor.role):
            logger.warning(f"User {actor.id} ({actor.role.value}) attempted to create a user")
            raise ForbiddenError(
                "Only Manager, Co-Owner, or Owner can manage users", code="INSUFFICIENT_ROLE"
            )
        if not can_create_with_role(actor.role, user_in.role):
            logger.warning(
                f"User {actor.id} ({actor.role.value}) attempted to create a {user_in.role.value} account"
            )
            raise ForbiddenError(f"Cannot create a user with role {user_in.role.value}")

        user = UserService.create(
            session, user_in, role=user_in.role, is_verified=True, active=True
        )
        logger.info(f"User {actor.id} created {user.role.value} account {user.email} (ID: {user.id})")
        return user

    @staticmethod
    def authenticate(session: Session, email: str, password: str) -> Optional[User]:
        """
        Check email and password.
        Verification and approval are checked by the caller so that it can tell
        the user which step is missing.

        Returns:
            User if the credentials match, None otherwise
        """
        user = UserService.get_by_email(session, email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    @staticmethod
    def list_all(session: Session) -> List[User]:
        """All users, newest first."""
        statement = select(User).order_by(col(User.created_at).desc(), col(User.id).desc())
        return list(session.exec(statement))

    @staticmethod
    def list_assignable(session: Session, actor: User) -> List[User]:
        """Active, verified users ranked at or below the actor, ordered by first name."""
        statement = (
            select(User)
            .where(User.active == True)  # noqa: E712
            .where(User.is_verified == True)  # noqa: E712
            .order_by(col(User.first_name), col(User.id))
        )
        return filter_assignable(actor.role, session.exec(statement))

    @staticmethod
    def update_profile(session: Session, actor: User, user_id: int, update: UserProfileUpdate) -> User:
        """
        Update a user's own names.

        Raises:
            ForbiddenError: If the actor edits someone else's profile
        """
        if actor.id != user_id:
            raise ForbiddenError("You can only update your own profile")
        actor.first_name = update.first_name
        actor.last_name = update.last_name
        actor.updated_at = utcnow()
        session.add(actor)
        session.commit()
        session.refresh(actor)
        return actor

    @staticmethod
    def set_password(session: Session, user: User, password: str) -> User:
        user.hashed_password = get_password_hash(password)
        user.updated_at = utcnow()
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    @staticmethod
    def password_reset_token(user: User) -> str:
        """A reset token is only good until the password it was issued against changes."""
        return create_purpose_token(
            TokenPurpose.RESET,
            {"sub": str(user.id), "pwd": password_fingerprint(user)},
            timedelta(hours=settings.RESET_TOKEN_EXPIRE_HOURS),
        )

    @staticmethod
    def reset_password(session: Session, token: str, password: str) -> User:
        """
        Redeem a password reset token.

        Raises:
            BadRequestError: If the token is invalid or expired, or was already used
            NotFoundError: If the user no longer exists
        """
        payload = decode_purpose_token(token, TokenPurpose.RESET)
        user = UserService.require(session, int(payload["sub"]))
        if payload.get("pwd") != password_fingerprint(user):
            logger.warning(f"Stale password reset token presented for user {user.id}")
            raise BadRequestError("Invalid or expired token", code="INVALID_TOKEN")
        UserService.set_password(session, user, password)
        logger.info(f"Password reset for user {user.id}")
        return user
