"""FastAPI dependencies for authentication, database and services."""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from user_service.config import get_settings
from user_service.database import get_db
from user_service.services.account_service import AccountService
from user_service.services.authorization import AuthorizationGate
from user_service.services.password import PasswordHasher
from user_service.services.repository import AccountRepository
from user_service.services.tokens import Identity, TokenService

# Documented as an API key header so the raw "Bearer <token>" value reaches the gate
authorization_header = APIKeyHeader(
    name="Authorization",
    auto_error=False,
    scheme_name="Bearer",
    description='JWT authorization header using the Bearer scheme. Example: "Bearer {token}"',
)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Get the process-wide password hasher."""
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


@lru_cache
def get_token_service() -> TokenService:
    """Get the process-wide token service built from settings."""
    settings = get_settings()
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(minutes=settings.jwt_expiration_minutes),
    )


def get_authorization_gate(
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> AuthorizationGate:
    return AuthorizationGate(token_service)


def get_account_repository(
    db: Annotated[Session, Depends(get_db)],
) -> AccountRepository:
    return AccountRepository(db)


def get_account_service(
    repository: Annotated[AccountRepository, Depends(get_account_repository)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
    gate: Annotated[AuthorizationGate, Depends(get_authorization_gate)],
) -> AccountService:
    """Get account service with dependencies."""
    return AccountService(repository, hasher, token_service, gate)


def get_current_identity(
    request: Request,
    authorization: Annotated[str | None, Security(authorization_header)],
    gate: Annotated[AuthorizationGate, Depends(get_authorization_gate)],
) -> Identity:
    """Resolve the caller's identity from the bearer token and attach it to the request."""
    identity = gate.authenticate(authorization)
    request.state.identity = identity
    return identity
