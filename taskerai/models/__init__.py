"""Database models. Both modules are imported so their relationships resolve."""

from taskerai.models.notification import Notification, NotificationType
from taskerai.models.user import User, UserRole

__all__ = ["Notification", "NotificationType", "User", "UserRole"]
