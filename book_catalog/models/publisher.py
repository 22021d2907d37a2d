from sqlmodel import Field

from book_catalog.models.base import TimestampedModel


class Publisher(TimestampedModel, table=True):
    """
    SQLModel representing a publisher.

    Use PublisherRepository for all database operations. Deleting a
    publisher deletes all of its books.

    Attributes:
        id: Primary key identifier for the publisher
        name: Unique name of the publisher
        city: Optional city the publisher is based in
        established_year: Optional founding year
    """

    __tablename__ = "publishers"  # type: ignore[assignment]
    __table_args__ = {"extend_existing": True}

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, unique=True)
    city: str | None = Field(default=None, max_length=100)
    established_year: int | None = Field(default=None)
