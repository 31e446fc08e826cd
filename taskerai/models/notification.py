"""
Notification model for in-app messages addressed to a single user.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlmodel import JSON, Column, Field, Relationship, SQLModel

from taskerai.models.user import User, utcnow


class NotificationType(str, Enum):
    """Notification type enumeration."""

    NEW_USER_REQUEST = "NEW_USER_REQUEST"
    WELCOME = "WELCOME"
    ACCOUNT_APPROVED = "ACCOUNT_APPROVED"
    ROLE_CHANGED = "ROLE_CHANGED"


class Notification(SQLModel, table=True):
    """
    A notification delivered to one receiver.
    The payload shape depends on the type and is stored as JSON.
    """

    __tablename__ = "notifications"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    receiver_id: int = Field(foreign_key="users.id", index=True)
    type: NotificationType
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, index=True)

    receiver: Optional[User] = Relationship(back_populates="notifications")
