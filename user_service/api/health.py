"""Health check endpoint."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from user_service.api.dependencies import get_account_repository
from user_service.services.errors import UnavailableError
from user_service.services.repository import AccountRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(repository: Annotated[AccountRepository, Depends(get_account_repository)]):
    """Report service status including database connectivity."""
    timestamp = datetime.now(UTC).isoformat()
    try:
        repository.ping()
    except UnavailableError as e:
        logger.error(f"Health check failed - database connection error: {e.reason}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "error",
                "timestamp": timestamp,
                "database": "disconnected",
                "error": e.message,
            },
        )

    return {"status": "ok", "timestamp": timestamp, "database": "connected"}
