"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from user_service.api.dependencies import get_account_service, get_current_identity
from user_service.schemas.response import ApiResponse, ErrorResponse
from user_service.schemas.user import (
    AuthData,
    NotificationPreferencesUpdate,
    PreferencesData,
    UserLogin,
    UserRegister,
    UserResponse,
    UserUpdate,
)
from user_service.services.account_service import AccountService
from user_service.services.tokens import Identity

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"],
    responses={
        400: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)

_AUTH_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Access token required"},
    403: {"model": ErrorResponse, "description": "Invalid token or not the owner"},
    404: {"model": ErrorResponse},
}


@router.post(
    "/",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
def create_user(
    user_data: UserRegister,
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Register a new user with default notification preferences."""
    result = service.register(user_data.email, user_data.password, user_data.name)
    return ApiResponse(success=True, message="User created successfully", data=result)


@router.post(
    "/login",
    response_model=ApiResponse[AuthData],
    responses={401: {"model": ErrorResponse}},
)
def login(
    credentials: UserLogin,
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Authenticate with email and password and receive a JWT."""
    result = service.login(credentials.email, credentials.password)
    return ApiResponse(success=True, message="Login successful", data=result)


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserResponse],
    responses={404: {"model": ErrorResponse}},
)
def get_user(
    user_id: str,
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Retrieve a user profile. No token required."""
    user = service.get_profile(user_id)
    return ApiResponse(success=True, message="User profile retrieved successfully", data=user)


@router.patch("/{user_id}", response_model=ApiResponse[UserResponse], responses=_AUTH_RESPONSES)
def update_user(
    user_id: str,
    updates: UserUpdate,
    identity: Annotated[Identity, Depends(get_current_identity)],
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Update the caller's own name and/or push token."""
    user = service.update_profile(user_id, identity, updates.model_dump(exclude_unset=True))
    return ApiResponse(success=True, message="User updated successfully", data=user)


@router.patch(
    "/{user_id}/preferences",
    response_model=ApiResponse[PreferencesData],
    responses=_AUTH_RESPONSES,
)
def update_preferences(
    user_id: str,
    preferences: NotificationPreferencesUpdate,
    identity: Annotated[Identity, Depends(get_current_identity)],
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Update the caller's own notification preferences."""
    result = service.update_preferences(
        user_id, identity, preferences.model_dump(exclude_unset=True)
    )
    return ApiResponse(
        success=True, message="Notification preferences updated successfully", data=result
    )
