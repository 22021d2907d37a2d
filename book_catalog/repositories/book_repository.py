"""
Repository for Book entity.

Books are always returned with their author and publisher loaded, because
every book representation embeds a summary of both.
"""

from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from book_catalog.models.author import Author
from book_catalog.models.book import Book
from book_catalog.models.publisher import Publisher
from book_catalog.repositories.base import BaseRepository
from book_catalog.schemas.listing import ListingSpec

BOOK_LISTING = ListingSpec(
    model=Book,
    search_field="title",
    sortable_fields=("title", "published_year", "pages"),
    default_sort="title",
    filterable_fields=("author_id", "publisher_id"),
    eager_load=("author", "publisher"),
)


class BookRepository(BaseRepository[Book]):
    """Repository for Book entity operations."""

    listing = BOOK_LISTING

    def __init__(self, session: AsyncSession):
        super().__init__(session, Book)

    async def get_by_id(self, id: int) -> Book | None:
        """
        Get a book with its author and publisher loaded.

        Args:
            id: Primary key value.

        Returns:
            Book if found, None otherwise.
        """
        stmt = (
            select(Book)
            .where(Book.id == id)
            .options(selectinload(Book.author), selectinload(Book.publisher))
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def author_exists(self, author_id: int) -> bool:
        return await self.session.get(Author, author_id) is not None

    async def publisher_exists(self, publisher_id: int) -> bool:
        return await self.session.get(Publisher, publisher_id) is not None

    async def load_relations(self, book: Book) -> Book:
        """
        Reload a written book's author and publisher.

        After a write the relationship attributes may still point at the
        previous owners, so they are refreshed from the database.
        """
        await self.session.refresh(book, attribute_names=["author", "publisher"])
        return book
