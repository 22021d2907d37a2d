import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field
from starlette.datastructures import URL
from typing_extensions import Annotated

T = TypeVar("T")


class MetadataModel(BaseModel):  # type: ignore[misc]
    """
    Pagination metadata of a list response.

    ``current_page`` echoes the requested page even when it lies beyond
    ``last_page``; ``from``/``to`` are the 1-based positions of the first
    and last item on the page, or null when the page is empty.
    """

    current_page: Annotated[int, Field(ge=1)]
    last_page: Annotated[int, Field(ge=1)]
    per_page: Annotated[int, Field(ge=1)]
    total: Annotated[int, Field(ge=0)]
    from_: int | None = Field(default=None, alias="from")
    to: int | None = None
    path: str | None = None

    model_config = {"populate_by_name": True}


class LinksModel(BaseModel):  # type: ignore[misc]
    first: str
    last: str
    prev: str | None = None
    next: str | None = None


class DataResponse(BaseModel, Generic[T]):  # type: ignore[misc]
    data: T


class PaginatedResponseModel(BaseModel, Generic[T]):  # type: ignore[misc]
    data: list[T]
    meta: MetadataModel
    links: LinksModel


def build_metadata(
    page: int, per_page: int, total: int, item_count: int
) -> MetadataModel:
    """
    Compute pagination metadata.

    Args:
        page: Requested page (already normalized to >= 1).
        per_page: Page size.
        total: Number of matching records before pagination.
        item_count: Number of records on this page.

    Returns:
        Metadata with ``last_page = max(1, ceil(total / per_page))``.
    """
    last_page = max(1, math.ceil(total / per_page))

    first_item = None
    last_item = None
    if item_count:
        first_item = (page - 1) * per_page + 1
        last_item = first_item + item_count - 1

    return MetadataModel(
        current_page=page,
        last_page=last_page,
        per_page=per_page,
        total=total,
        from_=first_item,
        to=last_item,
    )


def build_links(url: URL, meta: MetadataModel) -> LinksModel:
    """
    Build first/last/prev/next page URLs for a list response.

    The request's other query parameters (search, sort, filters) are kept so
    following a link continues the same listing.

    Args:
        url: URL of the current list request.
        meta: Metadata of the current page.

    Returns:
        Page links; ``prev``/``next`` are null at the boundaries.
    """

    def page_url(page: int) -> str:
        return str(url.include_query_params(page=page))

    prev_page = meta.current_page - 1 if meta.current_page > 1 else None
    next_page = (
        meta.current_page + 1
        if meta.current_page < meta.last_page
        else None
    )

    return LinksModel(
        first=page_url(1),
        last=page_url(meta.last_page),
        prev=page_url(prev_page) if prev_page else None,
        next=page_url(next_page) if next_page else None,
    )


def page_response(
    url: URL, items: list[T], meta: MetadataModel
) -> PaginatedResponseModel[T]:
    """
    Assemble a list response for the request at ``url``.

    Sets ``meta.path`` to the URL without its query string and adds the
    page links.
    """
    meta = meta.model_copy(update={"path": str(url.replace(query=""))})
    return PaginatedResponseModel(
        data=items, meta=meta, links=build_links(url, meta)
    )
