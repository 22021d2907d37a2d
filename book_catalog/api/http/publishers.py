"""
Publisher endpoints using Repository + Command + Dependency Injection.

All endpoints require a bearer token. List responses are paginated with
10 publishers per page:

    GET /api/publishers?search=gramedia&sort=established_year&order=desc&page=2
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status

from book_catalog.auth import get_current_user
from book_catalog.commands.publisher_commands import (
    CreatePublisherCommand,
    DeletePublisherCommand,
    GetPublisherCommand,
    ListPublishersCommand,
    UpdatePublisherCommand,
)
from book_catalog.commands.base import UpdateInput
from book_catalog.dependencies import PublisherRepoDep, RecordIdPath
from book_catalog.repositories.publisher_repository import PUBLISHER_LISTING
from book_catalog.schemas.publisher import PublisherDetailView, PublisherView
from book_catalog.schemas.errors import MessageResponse
from book_catalog.schemas.listing import parse_list_query
from book_catalog.schemas.response import (
    DataResponse,
    PaginatedResponseModel,
    page_response,
)

router = APIRouter(
    prefix="/api/publishers",
    tags=["publishers"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=PaginatedResponseModel[PublisherView],
    summary="List publishers",
)
async def index_publishers(
    request: Request, repo: PublisherRepoDep
) -> PaginatedResponseModel[PublisherView]:
    """
    Get one page of publishers.

    Query parameters:
        search: Case-insensitive substring of the name.
        sort: ``name`` (default), ``city`` or ``established_year``.
        order: ``asc`` (default) or ``desc``.
        page: Page number, starting at 1.
    """
    list_query = parse_list_query(request.query_params, PUBLISHER_LISTING)
    publishers, meta = await ListPublishersCommand(repo).execute(list_query)
    return page_response(request.url, publishers, meta)


@router.post(
    "",
    response_model=DataResponse[PublisherView],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new publisher",
)
async def store_publisher(
    payload: Annotated[dict[str, Any], Body()],
    repo: PublisherRepoDep,
) -> DataResponse[PublisherView]:
    """
    Create a new publisher.

    Example:
        POST /api/publishers
        {
            "name": "Bentang Pustaka",
            "city": "Yogyakarta",
            "established_year": 1994
        }
    """
    publisher = await CreatePublisherCommand(repo).execute(payload)
    return DataResponse[PublisherView](data=publisher)


@router.get(
    "/{publisher_id}",
    response_model=DataResponse[PublisherDetailView],
    summary="Get a publisher",
)
async def show_publisher(
    publisher_id: RecordIdPath, repo: PublisherRepoDep
) -> DataResponse[PublisherDetailView]:
    publisher = await GetPublisherCommand(repo).execute(publisher_id)
    return DataResponse[PublisherDetailView](data=publisher)


@router.api_route(
    "/{publisher_id}",
    methods=["PUT", "PATCH"],
    response_model=DataResponse[PublisherView],
    summary="Update a publisher",
)
async def update_publisher(
    publisher_id: RecordIdPath,
    payload: Annotated[dict[str, Any], Body()],
    repo: PublisherRepoDep,
) -> DataResponse[PublisherView]:
    """
    Update the supplied fields of a publisher.

    Fields missing from the body keep their current value.
    """
    publisher = await UpdatePublisherCommand(repo).execute(
        UpdateInput(id=publisher_id, payload=payload)
    )
    return DataResponse[PublisherView](data=publisher)


@router.delete(
    "/{publisher_id}",
    response_model=MessageResponse,
    summary="Delete a publisher and its books",
)
async def destroy_publisher(
    publisher_id: RecordIdPath, repo: PublisherRepoDep
) -> MessageResponse:
    await DeletePublisherCommand(repo).execute(publisher_id)
    return MessageResponse(message="Publisher deleted")
