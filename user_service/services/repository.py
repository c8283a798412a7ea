"""Persistence access for users and their notification preferences.

This is the only module that talks to the ORM session. SQLAlchemy errors are
decoded here into ``NotFoundError``, ``ConflictError`` or ``UnavailableError``
and never escape to callers.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import func, select, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from user_service.models.notification_preferences import (
    DEFAULT_PREFERENCES,
    NotificationPreferences,
)
from user_service.models.user import User
from user_service.services.errors import ConflictError, NotFoundError, UnavailableError

logger = logging.getLogger(__name__)

USER_UPDATABLE_FIELDS = frozenset({"name", "push_token"})
PREFERENCE_FIELDS = frozenset(DEFAULT_PREFERENCES)

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class AccountRepository:
    """Reads and writes ``User`` and ``NotificationPreferences`` rows."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"{operation} violated a constraint: {e.orig}")
            raise ConflictError(reason=f"integrity error during {operation}") from None
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{operation} failed: {e}")
            raise UnavailableError(reason=f"database error during {operation}") from None

    def ping(self) -> None:
        """Run a trivial query to confirm the database is reachable."""
        with self._translate_errors("ping"):
            self.db.execute(text("SELECT 1"))

    def find_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        with self._translate_errors("find_by_email"):
            return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: str) -> User | None:
        """Get a user by id."""
        with self._translate_errors("find_by_id"):
            return self.db.query(User).filter(User.id == user_id).first()

    def create_account_with_default_preferences(
        self, email: str, password_hash: str, name: str
    ) -> User:
        """Create a user and its default preferences in one transaction."""
        with self._translate_errors("create_account"):
            user = User(email=email, password_hash=password_hash, name=name)
            user.notification_preferences = NotificationPreferences(**DEFAULT_PREFERENCES)
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user

    def update_account_fields(self, user_id: str, fields: dict[str, Any]) -> User:
        """Apply a partial update to a user. Unknown fields are ignored."""
        with self._translate_errors("update_account"):
            user = self.db.query(User).filter(User.id == user_id).first()
            if user is None:
                raise NotFoundError(reason=f"user {user_id} does not exist")

            for field, value in fields.items():
                if field in USER_UPDATABLE_FIELDS:
                    setattr(user, field, value)
            user.touch()

            self.db.commit()
            self.db.refresh(user)
            return user

    def upsert_preferences(
        self, user_id: str, preferences: dict[str, bool]
    ) -> NotificationPreferences:
        """Insert the preferences row if absent, otherwise merge into it.

        Runs as a single ``INSERT .. ON CONFLICT DO UPDATE`` statement. Defaults
        fill the unsupplied switches only when the row is created.
        """
        supplied = {k: v for k, v in preferences.items() if k in PREFERENCE_FIELDS}
        with self._translate_errors("upsert_preferences"):
            if self.db.query(User.id).filter(User.id == user_id).first() is None:
                raise NotFoundError(reason=f"user {user_id} does not exist")

            insert = _UPSERT_INSERTS.get(self.db.get_bind().dialect.name)
            if insert is None:
                raise UnavailableError(reason="database dialect does not support upsert")

            stmt = insert(NotificationPreferences).values(
                user_id=user_id, **{**DEFAULT_PREFERENCES, **supplied}
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[NotificationPreferences.user_id],
                set_={**supplied, "updated_at": func.now()},
            )
            self.db.execute(stmt)
            self.db.commit()

            row = self.db.execute(
                select(NotificationPreferences)
                .where(NotificationPreferences.user_id == user_id)
                .execution_options(populate_existing=True)
            ).scalar_one()
            return row
