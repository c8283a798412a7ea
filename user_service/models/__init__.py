"""SQLAlchemy models."""

from user_service.models.notification_preferences import NotificationPreferences
from user_service.models.user import User

__all__ = [
    "User",
    "NotificationPreferences",
]
