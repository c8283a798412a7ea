"""Mixins for SQLAlchemy models."""

from sqlalchemy import Column, DateTime, func


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns, set from the database clock."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def touch(self) -> None:
        """Mark the row as modified even when no other column changed."""
        self.updated_at = func.now()
