"""
Repository for Author entity with specialized query methods.

Example:
    ```python
    from book_catalog.repositories.author_repository import AuthorRepository
    from book_catalog.storage.db import async_session

    async with async_session() as session:
        repo = AuthorRepository(session)
        specific = await repo.get_by_name("Andrea Hirata")
        page, meta = await repo.paginate(ListQuery(search="hirata"))
    ```
"""

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from book_catalog.models.author import Author
from book_catalog.models.book import Book
from book_catalog.repositories.base import BaseRepository
from book_catalog.schemas.listing import ListingSpec

AUTHOR_LISTING = ListingSpec(
    model=Author,
    search_field="name",
    sortable_fields=("name", "birth_date"),
    default_sort="name",
)


class AuthorRepository(BaseRepository[Author]):
    """
    Repository for Author entity operations.

    Provides CRUD operations inherited from BaseRepository plus
    Author-specific query methods.
    """

    listing = AUTHOR_LISTING

    def __init__(self, session: AsyncSession):
        super().__init__(session, Author)

    async def get_by_name(self, name: str) -> Author | None:
        """
        Get author by exact name match.

        Args:
            name: Exact author name to search for.

        Returns:
            Author if found, None otherwise.
        """
        stmt = select(Author).where(Author.name == name)
        result = await self.session.exec(stmt)
        return result.first()

    async def count_books(self, author_id: int) -> int:
        """Number of books written by the author."""
        stmt = select(func.count(Book.id)).where(Book.author_id == author_id)
        result = await self.session.exec(stmt)
        return result.one()

    async def delete(self, entity: Author) -> None:
        """
        Delete an author together with all of their books.

        Both deletions are flushed in the request transaction, so either
        everything is removed or nothing is.

        Args:
            entity: The author to delete.
        """
        books = await self.session.exec(
            select(Book).where(Book.author_id == entity.id)
        )
        for book in books.all():
            await self.session.delete(book)

        await super().delete(entity)
