"""Exception handlers that render failures in the error envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_service.schemas.response import create_response
from user_service.services.errors import AccountError, ErrorKind, InvalidTokenError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(exc: AccountError) -> int:
    """Map an account error to its HTTP status."""
    # Rejected tokens answer 403, missing tokens 401
    if isinstance(exc, InvalidTokenError):
        return status.HTTP_403_FORBIDDEN
    return STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(
        f"{request.method} {request.url.path} -> {status_code} ({exc.kind}): {exc.reason}"
    )
    return JSONResponse(status_code=status_code, content=create_response(False, exc.message))


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    content = create_response(False, "Validation failed")
    content["errors"] = jsonable_encoder(exc.errors())
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Route not found"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=create_response(False, message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=create_response(False, "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccountError, account_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
