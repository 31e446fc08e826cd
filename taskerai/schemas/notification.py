"""
Notification and cleanup schemas.
"""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel

from taskerai.models.notification import NotificationType


class NotificationResponse(BaseModel):
    id: int
    receiver_id: int
    type: NotificationType
    data: Dict[str, Any]
    read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]


class PendingUserSummary(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CleanupResult(BaseModel):
    """Outcome of an on-demand pending-user sweep."""

    success: bool = True
    message: str
    deleted_count: int
    duration_minutes: int


class PendingUsersInfo(BaseModel):
    pending_count: int
    pending_users: List[PendingUserSummary]
