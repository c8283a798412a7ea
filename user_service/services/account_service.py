"""Account lifecycle: registration, login, profile and preference updates."""

import logging
from typing import Any

from user_service.schemas.user import (
    AuthData,
    NotificationPreferencesResponse,
    PreferencesData,
    UserResponse,
)
from user_service.services.authorization import AuthorizationGate
from user_service.services.errors import (
    BadRequestError,
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
)
from user_service.services.password import PasswordHasher
from user_service.services.repository import (
    PREFERENCE_FIELDS,
    USER_UPDATABLE_FIELDS,
    AccountRepository,
)
from user_service.services.tokens import Identity, TokenService

logger = logging.getLogger(__name__)


class AccountService:
    """Coordinates hashing, token issuance and persistence per request.

    Every user returned from here is a ``UserResponse``, which has no
    password field.
    """

    def __init__(
        self,
        repository: AccountRepository,
        hasher: PasswordHasher,
        token_service: TokenService,
        gate: AuthorizationGate,
    ):
        self.repository = repository
        self.hasher = hasher
        self.token_service = token_service
        self.gate = gate

    def register(self, email: str, password: str, name: str) -> AuthData:
        """Create an account with default preferences and return it with a token."""
        logger.info(f"Creating new user: {email}")

        if self.repository.find_by_email(email) is not None:
            logger.warning(f"User creation failed - email already exists: {email}")
            raise ConflictError(reason="email already registered")

        password_hash = self.hasher.hash(password)
        try:
            user = self.repository.create_account_with_default_preferences(
                email=email, password_hash=password_hash, name=name
            )
        except ConflictError:
            # Lost a race with a concurrent registration for the same email
            logger.warning(f"User creation failed - concurrent registration: {email}")
            raise ConflictError(reason="email registered concurrently") from None

        token = self.token_service.issue(user.id, user.email)
        logger.info(f"User created successfully: {user.id}")
        return AuthData(user=UserResponse.model_validate(user), token=token)

    def login(self, email: str, password: str) -> AuthData:
        """Verify credentials and return the user with a fresh token."""
        logger.info(f"User login attempt: {email}")

        user = self.repository.find_by_email(email)
        if user is None:
            self.hasher.dummy_verify()
            logger.warning(f"Login failed - user not found: {email}")
            raise InvalidCredentialsError(reason="unknown_email")

        if not self.hasher.verify(password, user.password_hash):
            logger.warning(f"Login failed - invalid password for user {user.id}")
            raise InvalidCredentialsError(reason="wrong_password")

        token = self.token_service.issue(user.id, user.email)
        logger.info(f"User logged in successfully: {user.id}")
        return AuthData(user=UserResponse.model_validate(user), token=token)

    def get_profile(self, account_id: str) -> UserResponse:
        """Get a user profile. Callable without authentication."""
        user = self.repository.find_by_id(account_id)
        if user is None:
            logger.warning(f"User profile retrieval failed - user not found: {account_id}")
            raise NotFoundError(reason="no such user")
        return UserResponse.model_validate(user)

    def update_profile(
        self, account_id: str, identity: Identity, fields: dict[str, Any]
    ) -> UserResponse:
        """Apply a partial profile update on behalf of the account owner."""
        self.gate.require_owner(identity, account_id, resource="profile")

        updates = {k: v for k, v in fields.items() if k in USER_UPDATABLE_FIELDS}
        if not updates:
            raise BadRequestError("No valid fields to update", reason="empty payload")

        logger.info(f"Updating user profile {account_id}: fields={sorted(updates)}")
        user = self.repository.update_account_fields(account_id, updates)
        logger.info(f"User profile updated successfully: {account_id}")
        return UserResponse.model_validate(user)

    def update_preferences(
        self, account_id: str, identity: Identity, preferences: dict[str, Any]
    ) -> PreferencesData:
        """Create or merge the account's notification preferences."""
        self.gate.require_owner(identity, account_id, resource="preferences")

        updates = {
            k: v for k, v in preferences.items() if k in PREFERENCE_FIELDS and v is not None
        }
        if not updates:
            raise BadRequestError("No preferences provided to update", reason="empty payload")

        logger.info(f"Updating notification preferences {account_id}: {updates}")
        row = self.repository.upsert_preferences(account_id, updates)

        # The returned timestamp is the account's, not the preferences row's
        user = self.repository.find_by_id(account_id)
        if user is None:
            raise NotFoundError(reason="user vanished after preferences update")

        logger.info(f"Notification preferences updated successfully: {account_id}")
        return PreferencesData(
            id=user.id,
            notification_preferences=NotificationPreferencesResponse.model_validate(row),
            updated_at=user.updated_at,
        )
