"""
Data access shared by the catalog repositories.

Each repository wraps one table and works on the session it is given, so
the repositories used by one request take part in the same transaction.
Writes are flushed, never committed; the request's session dependency
commits once the handler returns.

Example:
    ```python
    class PublisherRepository(BaseRepository[Publisher]):
        listing = PUBLISHER_LISTING

        def __init__(self, session: AsyncSession):
            super().__init__(session, Publisher)
    ```
"""

from typing import Any, ClassVar, Generic, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from book_catalog.logging import logger
from book_catalog.models.base import TimestampedModel
from book_catalog.schemas.listing import ListingSpec, ListQuery
from book_catalog.schemas.response import MetadataModel
from book_catalog.storage.pagination import paginate_listing

T = TypeVar("T", bound=TimestampedModel)


class BaseRepository(Generic[T]):
    """
    Lookups, listing and writes for one catalog table.

    Type Parameters:
        T: Table model handled by the repository.

    Attributes:
        session: Session of the current unit of work.
        model: Table model class.
        listing: Search/sort/filter rules of the table's list endpoint.
    """

    listing: ClassVar[ListingSpec]

    def __init__(self, session: AsyncSession, model: Type[T]):
        self.session = session
        self.model = model

    @property
    def name(self) -> str:
        return self.model.__name__

    async def get_by_id(self, id: int) -> T | None:
        """Row with primary key ``id``, or None."""
        return await self.session.get(self.model, id)

    async def get_all(self, **filters: Any) -> list[T]:
        """
        Rows whose columns equal the given values, in ID order.

        None values are ignored, e.g. ``get_all(author_id=3, isbn=None)``
        only filters on the author.

        Raises:
            SQLAlchemyError: If the query fails.
        """
        stmt = select(self.model).order_by(self.model.id)
        for column, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, column) == value)

        try:
            rows = await self.session.exec(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Error listing {self.name} rows: {e}")
            raise
        return list(rows.all())

    async def paginate(
        self, list_query: ListQuery
    ) -> tuple[list[T], MetadataModel]:
        """One page of rows for a validated list request."""
        return await paginate_listing(self.session, self.listing, list_query)

    async def _write(self, entity: T, action: str) -> T:
        """
        Stamp, flush and reload ``entity``.

        On failure the transaction is rolled back before the error is
        re-raised, so the session can still run the queries that explain a
        constraint violation.
        """
        entity.touch()
        self.session.add(entity)
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error {action} {self.name}: {e}")
            raise

        await self.session.refresh(entity)
        return entity

    async def create(self, entity: T) -> T:
        """
        Insert a new row.

        Returns:
            The row with its ID and both timestamps set.

        Raises:
            IntegrityError: A unique or foreign key constraint rejected
                the row.
        """
        return await self._write(entity, "creating")

    async def update(self, entity: T) -> T:
        """
        Write the changed attributes of an existing row.

        Raises:
            IntegrityError: A unique or foreign key constraint rejected
                the new values.
        """
        return await self._write(entity, "updating")

    async def delete(self, entity: T) -> None:
        try:
            await self.session.delete(entity)
            await self.session.flush()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error deleting {self.name}: {e}")
            raise

    async def exists(self, **filters: Any) -> bool:
        """True if some row has all the given column values."""
        stmt = select(self.model.id)
        for column, value in filters.items():
            stmt = stmt.where(getattr(self.model, column) == value)
        result = await self.session.exec(stmt.limit(1))
        return result.first() is not None

    async def is_taken(
        self, field: str, value: Any, exclude_id: int | None = None
    ) -> bool:
        """
        Check whether another row already holds ``value`` in a unique column.

        Args:
            field: Name of the unique column.
            value: Value to look for.
            exclude_id: ID of the row being updated, which never conflicts
                with itself.
        """
        stmt = select(self.model.id).where(
            getattr(self.model, field) == value
        )
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        result = await self.session.exec(stmt.limit(1))
        return result.first() is not None
