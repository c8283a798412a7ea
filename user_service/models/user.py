"""User model."""

from uuid import uuid4

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from user_service.database import Base
from user_service.models.mixins import TimestampMixin


def generate_user_id() -> str:
    return uuid4().hex


class User(Base, TimestampMixin):
    """User account used for authentication and profile storage."""

    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_user_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    push_token = Column(String(512), nullable=True)

    # Relationships
    notification_preferences = relationship(
        "NotificationPreferences",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="joined",
    )
