from datetime import date

from sqlalchemy import Text
from sqlmodel import Field

from book_catalog.models.base import TimestampedModel


class Author(TimestampedModel, table=True):
    """
    SQLModel representing an author.

    This is a clean data model without Active Record methods.
    Use AuthorRepository for all database operations. Deleting an author
    deletes all of its books.

    Attributes:
        id: Primary key identifier for the author
        name: Unique name of the author
        birth_date: Optional date of birth
        nationality: Optional nationality
        biography: Optional free-text biography
    """

    __tablename__ = "authors"  # type: ignore[assignment]
    __table_args__ = {"extend_existing": True}

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, unique=True)
    birth_date: date | None = Field(default=None)
    nationality: str | None = Field(default=None, max_length=50)
    biography: str | None = Field(default=None, sa_type=Text)
