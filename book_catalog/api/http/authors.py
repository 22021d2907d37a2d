"""
Author endpoints using Repository + Command + Dependency Injection.

All endpoints require a bearer token. List responses are paginated with
10 authors per page:

    GET /api/authors?search=hirata&sort=birth_date&order=desc&page=2
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status

from book_catalog.auth import get_current_user
from book_catalog.commands.author_commands import (
    CreateAuthorCommand,
    DeleteAuthorCommand,
    GetAuthorCommand,
    ListAuthorsCommand,
    UpdateAuthorCommand,
)
from book_catalog.commands.base import UpdateInput
from book_catalog.dependencies import AuthorRepoDep, RecordIdPath
from book_catalog.repositories.author_repository import AUTHOR_LISTING
from book_catalog.schemas.author import AuthorDetailView, AuthorView
from book_catalog.schemas.errors import MessageResponse
from book_catalog.schemas.listing import parse_list_query
from book_catalog.schemas.response import (
    DataResponse,
    PaginatedResponseModel,
    page_response,
)

router = APIRouter(
    prefix="/api/authors",
    tags=["authors"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=PaginatedResponseModel[AuthorView],
    summary="List authors",
)
async def index_authors(
    request: Request, repo: AuthorRepoDep
) -> PaginatedResponseModel[AuthorView]:
    """
    Get one page of authors.

    Query parameters:
        search: Case-insensitive substring of the name.
        sort: ``name`` (default) or ``birth_date``.
        order: ``asc`` (default) or ``desc``.
        page: Page number, starting at 1.
    """
    list_query = parse_list_query(request.query_params, AUTHOR_LISTING)
    authors, meta = await ListAuthorsCommand(repo).execute(list_query)
    return page_response(request.url, authors, meta)


@router.post(
    "",
    response_model=DataResponse[AuthorView],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new author",
)
async def store_author(
    payload: Annotated[dict[str, Any], Body()],
    repo: AuthorRepoDep,
) -> DataResponse[AuthorView]:
    """
    Create a new author.

    Example:
        POST /api/authors
        {
            "name": "Andrea Hirata",
            "birth_date": "1967-10-24",
            "nationality": "Indonesia"
        }
    """
    author = await CreateAuthorCommand(repo).execute(payload)
    return DataResponse[AuthorView](data=author)


@router.get(
    "/{author_id}",
    response_model=DataResponse[AuthorDetailView],
    summary="Get an author",
)
async def show_author(
    author_id: RecordIdPath, repo: AuthorRepoDep
) -> DataResponse[AuthorDetailView]:
    author = await GetAuthorCommand(repo).execute(author_id)
    return DataResponse[AuthorDetailView](data=author)


@router.api_route(
    "/{author_id}",
    methods=["PUT", "PATCH"],
    response_model=DataResponse[AuthorView],
    summary="Update an author",
)
async def update_author(
    author_id: RecordIdPath,
    payload: Annotated[dict[str, Any], Body()],
    repo: AuthorRepoDep,
) -> DataResponse[AuthorView]:
    """
    Update the supplied fields of an author.

    Fields missing from the body keep their current value.
    """
    author = await UpdateAuthorCommand(repo).execute(
        UpdateInput(id=author_id, payload=payload)
    )
    return DataResponse[AuthorView](data=author)


@router.delete(
    "/{author_id}",
    response_model=MessageResponse,
    summary="Delete an author and their books",
)
async def destroy_author(
    author_id: RecordIdPath, repo: AuthorRepoDep
) -> MessageResponse:
    await DeleteAuthorCommand(repo).execute(author_id)
    return MessageResponse(message="Author deleted")
