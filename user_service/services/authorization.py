"""Request authorization: bearer token extraction and ownership checks."""

import logging

from user_service.services.errors import ForbiddenError, InvalidTokenError, MissingTokenError
from user_service.services.tokens import Identity, TokenError, TokenService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

OWNERSHIP_MESSAGES = {
    "profile": "You can only update your own profile",
    "preferences": "You can only update your own preferences",
}


class AuthorizationGate:
    """Resolves the caller's identity and guards per-account resources."""

    def __init__(self, token_service: TokenService):
        self.token_service = token_service

    def authenticate(self, authorization_header: str | None) -> Identity:
        """Resolve the identity from an ``Authorization: Bearer <token>`` header."""
        if not authorization_header or not authorization_header.startswith(BEARER_PREFIX):
            raise MissingTokenError(reason="missing or non-bearer authorization header")

        token = authorization_header[len(BEARER_PREFIX) :].strip()
        if not token:
            raise MissingTokenError(reason="empty bearer token")

        try:
            return self.token_service.verify(token)
        except TokenError as e:
            logger.warning(f"Token rejected ({type(e).__name__}): {e.reason}")
            raise InvalidTokenError(reason=e.reason) from e

    def require_owner(
        self, identity: Identity, account_id: str, resource: str = "profile"
    ) -> None:
        """Raise ``ForbiddenError`` unless ``identity`` owns ``account_id``."""
        if identity.subject_id != account_id:
            logger.warning(
                f"Ownership check failed for {resource}: "
                f"{identity.subject_id} attempted to modify {account_id}"
            )
            raise ForbiddenError(
                OWNERSHIP_MESSAGES.get(resource, OWNERSHIP_MESSAGES["profile"]),
                reason="identity does not own account",
            )
