"""Notification preferences model."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, false, true
from sqlalchemy.orm import relationship

from user_service.database import Base
from user_service.models.mixins import TimestampMixin

DEFAULT_PREFERENCES = {"email": True, "push": True, "sms": False}


class NotificationPreferences(Base, TimestampMixin):
    """Per-user notification channel switches (one row per user)."""

    __tablename__ = "notification_preferences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String(32), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    email = Column(Boolean, nullable=False, default=True, server_default=true())
    push = Column(Boolean, nullable=False, default=True, server_default=true())
    sms = Column(Boolean, nullable=False, default=False, server_default=false())

    # Relationships
    user = relationship("User", back_populates="notification_preferences")
