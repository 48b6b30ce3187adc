"""Column mixins shared by the models."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, func


class TimestampMixin:
    """created_at / updated_at maintained by the database."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SoftDeleteMixin:
    """Rows are hidden by stamping deleted_at instead of being removed.

    Queries over soft-deletable models filter with :meth:`not_deleted`.
    """

    deleted_at = Column(DateTime(timezone=True), nullable=True)

    @classmethod
    def not_deleted(cls):
        """SQL criterion matching live rows."""
        return cls.deleted_at.is_(None)

    def soft_delete(self) -> None:
        self.deleted_at = datetime.now(UTC)
