"""
Offset-based pagination strategy (traditional page numbers).

Implements offset/limit pagination using page numbers, which is what the
dashboard's "Page 1, 2, 3..." controls expect.
"""

from typing import Any, Type

from sqlalchemy import Select
from sqlmodel.ext.asyncio.session import AsyncSession

from book_catalog.schemas.generic_typing import GenericSQLModelType
from book_catalog.schemas.response import MetadataModel, build_metadata


class OffsetPaginationStrategy:
    """
    Traditional offset-based pagination (page 1, 2, 3...).

    The total is counted with a separate query sharing the data query's
    conditions; both run in the same session, so they see the same
    snapshot inside the request transaction.

    Example:
        ```python
        async with async_session() as session:
            strategy = OffsetPaginationStrategy(session, page=2)
            items, meta = await strategy.paginate(
                build_query(AUTHOR_LISTING, list_query),
                build_count_query(AUTHOR_LISTING, list_query),
                Author,
                10,
            )
        ```
    """

    def __init__(self, session: AsyncSession, page: int = 1):
        """
        Initialize offset pagination strategy.

        Args:
            session: SQLModel async session for database queries.
            page: Page number (1-indexed). Values below 1 are treated as 1.
        """
        self.session = session
        self.page = max(page, 1)

    async def paginate(
        self,
        query: Select[Any],
        count_query: Select[Any],
        model: Type[GenericSQLModelType],
        page_size: int,
    ) -> tuple[list[GenericSQLModelType], MetadataModel]:
        """
        Execute offset-based pagination on the query.

        Args:
            query: Ordered data query with filters and eager loading applied.
            count_query: Query returning the number of matching rows.
            model: The SQLModel class being queried.
            page_size: Number of items per page.

        Returns:
            Tuple of (items, metadata). A page past the last one yields no
            items while the metadata still reports the requested page.

        Raises:
            SQLAlchemyError: If database query fails.
        """
        total_result = await self.session.exec(count_query)
        total = total_result.one()

        offset = (self.page - 1) * page_size
        results = await self.session.exec(
            query.offset(offset).limit(page_size)
        )
        items = list(results.all())

        meta = build_metadata(self.page, page_size, total, len(items))

        return items, meta
