"""Pydantic schemas for API requests and responses."""

from user_service.schemas.response import ApiResponse, ErrorResponse, create_response
from user_service.schemas.user import (
    AuthData,
    NotificationPreferencesResponse,
    NotificationPreferencesUpdate,
    PreferencesData,
    UserLogin,
    UserRegister,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "create_response",
    "AuthData",
    "NotificationPreferencesResponse",
    "NotificationPreferencesUpdate",
    "PreferencesData",
    "UserLogin",
    "UserRegister",
    "UserResponse",
    "UserUpdate",
]
