"""
User model and the role hierarchy.

Roles form a total order used for every hierarchy comparison:
EMPLOYEE < TEAM_LEAD < MANAGER < CO_OWNER < OWNER.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

from taskerai.core.exceptions import BadRequestError

if TYPE_CHECKING:
    from taskerai.models.notification import Notification


class UserRole(str, Enum):
    """User role enumeration for RBAC, declared from lowest to highest rank."""

    EMPLOYEE = "EMPLOYEE"
    TEAM_LEAD = "TEAM_LEAD"
    MANAGER = "MANAGER"
    CO_OWNER = "CO_OWNER"
    OWNER = "OWNER"


ROLE_RANKS: dict[UserRole, int] = {role: index for index, role in enumerate(UserRole)}


def rank(role: UserRole) -> int:
    """Return the position of a role in the hierarchy (EMPLOYEE is 0)."""
    return ROLE_RANKS[role]


def is_valid_role(value: object) -> bool:
    """Check whether a raw value names one of the known roles."""
    if isinstance(value, UserRole):
        return True
    return isinstance(value, str) and value in UserRole.__members__


def parse_role(value: object) -> UserRole:
    """
    Convert a raw boundary value into a UserRole.

    Raises:
        BadRequestError: If the value is not a known role
    """
    if not is_valid_role(value):
        raise BadRequestError("Invalid role", code="INVALID_ROLE")
    return UserRole(value)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    User model with authentication and role support.

    Attributes:
        id: Primary key
        email: Unique, lower-cased email address (used for login)
        hashed_password: Password hash
        first_name: Given name
        last_name: Family name
        role: Position in the role hierarchy
        is_verified: Set once the email confirmation token is redeemed
        active: Set only by an explicit approval; governs login eligibility
        created_at: Timestamp of account creation
        updated_at: Timestamp of last update
    """

    __tablename__ = "users"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    hashed_password: str
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    role: UserRole = Field(default=UserRole.EMPLOYEE, index=True)
    is_verified: bool = Field(default=False)
    active: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)

    notifications: List["Notification"] = Relationship(
        back_populates="receiver",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
