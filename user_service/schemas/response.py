"""Response envelope schemas shared by all endpoints."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: ``{success, message, data}``."""

    success: bool = True
    message: str
    data: T | None = None


class ErrorResponse(BaseModel):
    """Error envelope: ``{success, message, error?}``."""

    success: bool = False
    message: str
    error: str | None = None


def create_response(success: bool, message: str) -> dict[str, Any]:
    """Build a bare response envelope; callers add extra keys as needed."""
    return {"success": success, "message": message}
