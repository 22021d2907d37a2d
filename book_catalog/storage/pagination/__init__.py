"""
List-query pipeline for the catalog's list endpoints.

Example:
    ```python
    from book_catalog.storage.pagination import paginate_listing

    list_query = parse_list_query(request.query_params, BOOK_LISTING)
    books, meta = await paginate_listing(session, BOOK_LISTING, list_query)
    ```
"""

from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from book_catalog.constants import PAGE_SIZE
from book_catalog.schemas.listing import ListingSpec, ListQuery
from book_catalog.schemas.response import MetadataModel
from book_catalog.storage.pagination.offset import OffsetPaginationStrategy
from book_catalog.storage.pagination.query_builder import (
    build_count_query,
    build_query,
)


async def paginate_listing(
    session: AsyncSession,
    spec: ListingSpec,
    list_query: ListQuery,
    page_size: int = PAGE_SIZE,
) -> tuple[list[Any], MetadataModel]:
    """
    Run the full list pipeline: filter, search, sort, then paginate.

    Args:
        session: Database session.
        spec: Listing rules of the entity.
        list_query: Validated request descriptor.
        page_size: Records per page.

    Returns:
        Tuple of (items on the requested page, pagination metadata).
    """
    strategy = OffsetPaginationStrategy(session, page=list_query.page)
    return await strategy.paginate(
        build_query(spec, list_query),
        build_count_query(spec, list_query),
        spec.model,
        page_size,
    )


__all__ = [
    "OffsetPaginationStrategy",
    "build_count_query",
    "build_query",
    "paginate_listing",
]
