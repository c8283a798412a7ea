"""User and notification preference schemas."""

from datetime import datetime
from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from user_service.models.notification_preferences import DEFAULT_PREFERENCES


def _check_email(value: str) -> str:
    # Validate only; the address is stored and compared exactly as sent
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}") from None
    return value


EmailAddress = Annotated[str, AfterValidator(_check_email)]


class UserRegister(BaseModel):
    """User registration request."""

    email: EmailAddress = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailAddress = Field(..., max_length=255)
    password: str = Field(..., max_length=128)


class UserUpdate(BaseModel):
    """Partial profile update. Only fields present in the body are applied."""

    name: str | None = Field(None, min_length=1, max_length=100)
    push_token: str | None = Field(None, max_length=512)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value: str | None) -> str | None:
        if value is None:
            raise ValueError("name cannot be null")
        return value


class NotificationPreferencesUpdate(BaseModel):
    """Partial notification preferences update."""

    email: bool | None = None
    push: bool | None = None
    sms: bool | None = None


class NotificationPreferencesResponse(BaseModel):
    """Notification preferences as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    email: bool
    push: bool
    sms: bool


class UserResponse(BaseModel):
    """User information response. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    push_token: str | None
    notification_preferences: NotificationPreferencesResponse
    created_at: datetime
    updated_at: datetime

    @field_validator("notification_preferences", mode="before")
    @classmethod
    def default_preferences(cls, value):
        # A user without a preferences row behaves as if it had the defaults
        if value is None:
            return dict(DEFAULT_PREFERENCES)
        return value


class AuthData(BaseModel):
    """Payload returned by registration and login."""

    user: UserResponse
    token: str


class PreferencesData(BaseModel):
    """Payload returned by a preferences update."""

    id: str
    notification_preferences: NotificationPreferencesResponse
    updated_at: datetime
