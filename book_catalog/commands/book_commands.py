"""
Commands for Book business operations.

Besides the field rules, a book write must point at an existing author
and publisher, and its ISBN (when given) must be free. Foreign keys and
the unique ISBN constraint are enforced by the database during the
write; ``find_book_conflicts`` explains a rejected write as field errors.
"""

from typing import Any, Mapping

from sqlalchemy.exc import IntegrityError

from book_catalog.commands.base import (
    BaseCommand,
    UpdateInput,
    find_unique_conflicts,
)
from book_catalog.exceptions import NotFoundError, ValidationError
from book_catalog.logging import logger
from book_catalog.models.book import Book
from book_catalog.repositories.book_repository import BookRepository
from book_catalog.schemas.book import BookView
from book_catalog.schemas.errors import FieldError
from book_catalog.schemas.listing import ListQuery
from book_catalog.schemas.response import MetadataModel
from book_catalog.validation.book import validate_book
from book_catalog.validation.rules import exists_error

UNIQUE_FIELDS = ("isbn",)


async def find_book_conflicts(
    repository: BookRepository,
    data: dict[str, Any],
    exclude_id: int | None = None,
) -> list[FieldError]:
    """
    Report taken ISBNs and references to missing authors or publishers.

    Args:
        repository: Book repository.
        data: Cleaned values about to be written.
        exclude_id: ID of the book being updated.

    Returns:
        Field errors for every conflicting field.
    """
    errors = await find_unique_conflicts(
        repository, data, UNIQUE_FIELDS, exclude_id=exclude_id
    )

    author_id = data.get("author_id")
    if author_id is not None and not await repository.author_exists(author_id):
        errors.append(exists_error("author_id"))

    publisher_id = data.get("publisher_id")
    if publisher_id is not None and not await repository.publisher_exists(
        publisher_id
    ):
        errors.append(exists_error("publisher_id"))

    return errors


def book_view(book: Book) -> BookView:
    """View of a book whose author and publisher are loaded."""
    return BookView.from_model(book, book.author, book.publisher)


class ListBooksCommand(
    BaseCommand[ListQuery, tuple[list[BookView], MetadataModel]]
):
    """
    Command to get one page of books.

    Supports the ``author_id``/``publisher_id`` equality filters on top of
    the title search.
    """

    def __init__(self, repository: BookRepository):
        self.repository = repository

    async def execute(
        self, input_data: ListQuery
    ) -> tuple[list[BookView], MetadataModel]:
        books, meta = await self.repository.paginate(input_data)
        return [book_view(book) for book in books], meta


class GetBookCommand(BaseCommand[int, BookView]):
    def __init__(self, repository: BookRepository):
        self.repository = repository

    async def execute(self, book_id: int) -> BookView:
        book = await self.repository.get_by_id(book_id)
        if not book:
            raise NotFoundError("Book not found")

        return book_view(book)


class CreateBookCommand(BaseCommand[Mapping[str, Any], BookView]):
    """Command to create a new book."""

    def __init__(self, repository: BookRepository):
        """
        Initialize command with repository.

        Args:
            repository: Book repository for data access.
        """
        self.repository = repository

    async def execute(self, input_data: Mapping[str, Any]) -> BookView:
        """
        Execute command to create book.

        Args:
            input_data: Decoded request body.

        Returns:
            Created book with its author and publisher summaries.

        Raises:
            ValidationError: If a field rule fails, the ISBN is taken, or
                the author or publisher does not exist. Nothing is written.
        """
        data, errors = validate_book(input_data)
        if errors:
            errors += await find_book_conflicts(self.repository, data)
            raise ValidationError(errors)

        try:
            book = await self.repository.create(Book(**data))
        except IntegrityError:
            conflicts = await find_book_conflicts(self.repository, data)
            if not conflicts:
                raise
            logger.info(f"Rejected book create: {conflicts[0].message}")
            raise ValidationError(conflicts)

        await self.repository.load_relations(book)
        return book_view(book)


class UpdateBookCommand(BaseCommand[UpdateInput, BookView]):
    """
    Command to partially update an existing book.

    Only supplied fields change; the book's own ISBN never conflicts with
    itself.
    """

    def __init__(self, repository: BookRepository):
        self.repository = repository

    async def execute(self, input_data: UpdateInput) -> BookView:
        """
        Execute command to update book.

        Args:
            input_data: Book ID and the supplied fields.

        Returns:
            Updated book.

        Raises:
            NotFoundError: If book not found.
            ValidationError: If a field rule or reference check fails.
        """
        book_id = input_data.id
        book = await self.repository.get_by_id(book_id)
        if not book:
            raise NotFoundError("Book not found")

        data, errors = validate_book(input_data.payload, partial=True)
        if errors:
            errors += await find_book_conflicts(
                self.repository, data, exclude_id=book_id
            )
            raise ValidationError(errors)

        for field, value in data.items():
            setattr(book, field, value)

        try:
            book = await self.repository.update(book)
        except IntegrityError:
            conflicts = await find_book_conflicts(
                self.repository, data, exclude_id=book_id
            )
            if not conflicts:
                raise
            logger.info(f"Rejected book update: {conflicts[0].message}")
            raise ValidationError(conflicts)

        await self.repository.load_relations(book)
        return book_view(book)


class DeleteBookCommand(BaseCommand[int, None]):
    def __init__(self, repository: BookRepository):
        self.repository = repository

    async def execute(self, book_id: int) -> None:
        """
        Raises:
            NotFoundError: If book not found.
        """
        book = await self.repository.get_by_id(book_id)
        if not book:
            raise NotFoundError("Book not found")

        await self.repository.delete(book)
