from sqlalchemy import Text
from sqlmodel import Field, Relationship

from book_catalog.models.author import Author
from book_catalog.models.base import TimestampedModel
from book_catalog.models.publisher import Publisher


class Book(TimestampedModel, table=True):
    """
    SQLModel representing a book.

    Every book belongs to exactly one author and one publisher. The foreign
    keys cascade on delete so the database removes books together with
    their owner.

    Attributes:
        id: Primary key identifier for the book
        title: Title of the book
        isbn: Optional 13-character ISBN, unique when present
        published_year: Optional year of publication
        pages: Optional page count
        synopsis: Optional free-text synopsis
        author_id: Owning author
        publisher_id: Owning publisher
        author: Related author (load eagerly with selectinload)
        publisher: Related publisher (load eagerly with selectinload)
    """

    __tablename__ = "books"  # type: ignore[assignment]
    __table_args__ = {"extend_existing": True}

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(max_length=200)
    isbn: str | None = Field(default=None, max_length=13, unique=True)
    published_year: int | None = Field(default=None)
    pages: int | None = Field(default=None)
    synopsis: str | None = Field(default=None, sa_type=Text)
    author_id: int = Field(
        foreign_key="authors.id", ondelete="CASCADE", index=True
    )
    publisher_id: int = Field(
        foreign_key="publishers.id", ondelete="CASCADE", index=True
    )

    author: Author | None = Relationship()
    publisher: Publisher | None = Relationship()
