"""
Base models for all database tables.

``BaseModel`` combines SQLModel with SQLAlchemy's ``AsyncAttrs`` mixin so
relationships can be awaited in async code. ``TimestampedModel`` adds the
``created_at``/``updated_at`` columns shared by every catalog table.

Relationships are never lazy-loaded inside a request; load them eagerly:

    async with async_session() as session:
        stmt = select(Book).options(selectinload(Book.author))
        books = (await session.exec(stmt)).all()
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, second precision."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


class BaseModel(SQLModel, AsyncAttrs):  # type: ignore[misc]
    """Base model for all database tables with async relationship support."""

    pass


class TimestampedModel(BaseModel):
    """
    Base model for tables tracking creation and modification time.

    Attributes:
        created_at: Set once, when the row is inserted.
        updated_at: Refreshed on every insert and update.
    """

    # Naive UTC, matching the DateTime columns of the migrations
    created_at: datetime | None = Field(default=None, sa_type=DateTime)
    updated_at: datetime | None = Field(default=None, sa_type=DateTime)

    def touch(self, now: datetime | None = None) -> None:
        """
        Refresh the modification timestamp.

        Sets ``created_at`` too when the row has never been saved.

        Args:
            now: Timestamp to use; defaults to the current UTC time.
        """
        now = now or utcnow()
        if self.created_at is None:
            self.created_at = now
        self.updated_at = now
