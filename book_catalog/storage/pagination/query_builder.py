"""
Query construction for list endpoints.

Turns a validated ``ListQuery`` into SQLAlchemy statements, applying the
listing steps in a fixed order so identical requests always produce the
same page:

1. equality filters (``filter[key]=value``)
2. case-insensitive substring search on the designated text field
3. ordering by the requested field, ties broken by primary key ascending

Slicing to the requested page is done by the pagination strategy.
"""

from typing import Any

from sqlalchemy import ColumnElement, Select
from sqlalchemy.orm import selectinload
from sqlmodel import func, select

from book_catalog.logging import logger
from book_catalog.schemas.listing import ListingSpec, ListQuery


def build_conditions(
    spec: ListingSpec, list_query: ListQuery
) -> list[ColumnElement[bool]]:
    """
    Build the WHERE conditions shared by the data and count queries.

    Args:
        spec: Listing rules of the entity.
        list_query: Validated request descriptor.

    Returns:
        Filter conditions first, then the search condition.
    """
    model = spec.model
    conditions: list[ColumnElement[bool]] = []

    for key, value in list_query.filters.items():
        conditions.append(getattr(model, key) == value)

    if list_query.search:
        column = getattr(model, spec.search_field)
        # autoescape makes "%" and "_" in the search text literal
        conditions.append(column.icontains(list_query.search, autoescape=True))

    return conditions


def build_query(spec: ListingSpec, list_query: ListQuery) -> Select[Any]:
    """
    Build the ordered, filtered data query for a listing.

    Args:
        spec: Listing rules of the entity.
        list_query: Validated request descriptor.

    Returns:
        Select statement with filters, search, eager loading and ordering
        applied but no OFFSET/LIMIT.

    Example:
        >>> query = build_query(
        ...     AUTHOR_LISTING, ListQuery(search="b", sort="name")
        ... )
    """
    model = spec.model
    query: Select[Any] = select(model)

    # Eager loading prevents lazy loads (and N+1 queries) while serializing
    for relationship in spec.eager_load:
        if hasattr(model, relationship):
            query = query.options(selectinload(getattr(model, relationship)))
        else:
            logger.warning(
                f"Relationship '{relationship}' not found on {model.__name__}"
            )

    conditions = build_conditions(spec, list_query)
    if conditions:
        query = query.where(*conditions)

    sort_column = getattr(model, list_query.sort)
    primary_order = (
        sort_column.desc() if list_query.descending else sort_column.asc()
    )

    return query.order_by(primary_order, model.id.asc())


def build_count_query(
    spec: ListingSpec, list_query: ListQuery
) -> Select[Any]:
    """
    Build the query counting all records that match the listing, before
    pagination.
    """
    model = spec.model
    count_query: Select[Any] = select(func.count(model.id))

    conditions = build_conditions(spec, list_query)
    if conditions:
        count_query = count_query.where(*conditions)

    return count_query
