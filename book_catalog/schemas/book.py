"""
Response models for books.

A book is always shown with a ``{id, name}`` summary of its author and
publisher. Both are passed to ``BookView.from_model`` explicitly, so
building a view never triggers a relationship load.
"""

from book_catalog.models.author import Author
from book_catalog.models.book import Book
from book_catalog.models.publisher import Publisher
from book_catalog.schemas.base import RelatedSummary, TimestampedView


class BookView(TimestampedView):
    id: int
    title: str
    isbn: str | None = None
    published_year: int | None = None
    pages: int | None = None
    synopsis: str | None = None
    author_id: int
    publisher_id: int
    author: RelatedSummary | None = None
    publisher: RelatedSummary | None = None

    @classmethod
    def from_model(
        cls,
        book: Book,
        author: Author | None,
        publisher: Publisher | None,
    ) -> "BookView":
        """
        Build the view of a book.

        Args:
            book: The book row.
            author: The book's author, already loaded.
            publisher: The book's publisher, already loaded.
        """
        return cls(
            id=book.id,
            title=book.title,
            isbn=book.isbn,
            published_year=book.published_year,
            pages=book.pages,
            synopsis=book.synopsis,
            author_id=book.author_id,
            publisher_id=book.publisher_id,
            author=(
                RelatedSummary(id=author.id, name=author.name)
                if author
                else None
            ),
            publisher=(
                RelatedSummary(id=publisher.id, name=publisher.name)
                if publisher
                else None
            ),
            created_at=book.created_at,
            updated_at=book.updated_at,
        )
