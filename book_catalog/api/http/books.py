"""
Book endpoints using Repository + Command + Dependency Injection.

All endpoints require a bearer token. List responses are paginated with
10 books per page, each with its author and publisher:

    GET /api/books?filter[author_id]=3&search=pelangi&sort=published_year
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status

from book_catalog.auth import get_current_user
from book_catalog.commands.book_commands import (
    CreateBookCommand,
    DeleteBookCommand,
    GetBookCommand,
    ListBooksCommand,
    UpdateBookCommand,
)
from book_catalog.commands.base import UpdateInput
from book_catalog.dependencies import BookRepoDep, RecordIdPath
from book_catalog.repositories.book_repository import BOOK_LISTING
from book_catalog.schemas.book import BookView
from book_catalog.schemas.errors import MessageResponse
from book_catalog.schemas.listing import parse_list_query
from book_catalog.schemas.response import (
    DataResponse,
    PaginatedResponseModel,
    page_response,
)

router = APIRouter(
    prefix="/api/books",
    tags=["books"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=PaginatedResponseModel[BookView],
    summary="List books",
)
async def index_books(
    request: Request, repo: BookRepoDep
) -> PaginatedResponseModel[BookView]:
    """
    Get one page of books.

    Query parameters:
        search: Case-insensitive substring of the title.
        filter[author_id], filter[publisher_id]: Equality filters; the
            bare ``author_id``/``publisher_id`` forms work too.
        sort: ``title`` (default), ``published_year`` or ``pages``.
        order: ``asc`` (default) or ``desc``.
        page: Page number, starting at 1.
    """
    list_query = parse_list_query(request.query_params, BOOK_LISTING)
    books, meta = await ListBooksCommand(repo).execute(list_query)
    return page_response(request.url, books, meta)


@router.post(
    "",
    response_model=DataResponse[BookView],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
)
async def store_book(
    payload: Annotated[dict[str, Any], Body()],
    repo: BookRepoDep,
) -> DataResponse[BookView]:
    """
    Create a new book.

    Example:
        POST /api/books
        {
            "title": "Laskar Pelangi",
            "isbn": "9789793062792",
            "published_year": 2005,
            "author_id": 1,
            "publisher_id": 1
        }
    """
    book = await CreateBookCommand(repo).execute(payload)
    return DataResponse[BookView](data=book)


@router.get(
    "/{book_id}",
    response_model=DataResponse[BookView],
    summary="Get a book",
)
async def show_book(
    book_id: RecordIdPath, repo: BookRepoDep
) -> DataResponse[BookView]:
    book = await GetBookCommand(repo).execute(book_id)
    return DataResponse[BookView](data=book)


@router.api_route(
    "/{book_id}",
    methods=["PUT", "PATCH"],
    response_model=DataResponse[BookView],
    summary="Update a book",
)
async def update_book(
    book_id: RecordIdPath,
    payload: Annotated[dict[str, Any], Body()],
    repo: BookRepoDep,
) -> DataResponse[BookView]:
    """
    Update the supplied fields of a book.

    Fields missing from the body keep their current value. A new
    ``author_id`` or ``publisher_id`` must point at an existing record.
    """
    book = await UpdateBookCommand(repo).execute(
        UpdateInput(id=book_id, payload=payload)
    )
    return DataResponse[BookView](data=book)


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    summary="Delete a book",
)
async def destroy_book(
    book_id: RecordIdPath, repo: BookRepoDep
) -> MessageResponse:
    await DeleteBookCommand(repo).execute(book_id)
    return MessageResponse(message="Book deleted")
