"""Repository for Publisher entity."""

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from book_catalog.models.book import Book
from book_catalog.models.publisher import Publisher
from book_catalog.repositories.base import BaseRepository
from book_catalog.schemas.listing import ListingSpec

PUBLISHER_LISTING = ListingSpec(
    model=Publisher,
    search_field="name",
    sortable_fields=("name", "city", "established_year"),
    default_sort="name",
)


class PublisherRepository(BaseRepository[Publisher]):
    """Repository for Publisher entity operations."""

    listing = PUBLISHER_LISTING

    def __init__(self, session: AsyncSession):
        super().__init__(session, Publisher)

    async def count_books(self, publisher_id: int) -> int:
        """Number of books released by the publisher."""
        stmt = select(func.count(Book.id)).where(
            Book.publisher_id == publisher_id
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def delete(self, entity: Publisher) -> None:
        """
        Delete a publisher together with all of its books.

        Args:
            entity: The publisher to delete.
        """
        books = await self.session.exec(
            select(Book).where(Book.publisher_id == entity.id)
        )
        for book in books.all():
            await self.session.delete(book)

        await super().delete(entity)
