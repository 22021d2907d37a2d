"""
Commands for Author business operations.

Example:
    ```python
    from book_catalog.commands.author_commands import CreateAuthorCommand

    @router.post("/api/authors", status_code=201)
    async def store_author(payload: JsonObject, repo: AuthorRepoDep):
        command = CreateAuthorCommand(repo)
        return DataResponse(data=await command.execute(payload))
    ```
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
from book_catalog.models.author import Author
from book_catalog.repositories.author_repository import AuthorRepository
from book_catalog.schemas.author import AuthorDetailView, AuthorView
from book_catalog.schemas.listing import ListQuery
from book_catalog.schemas.response import MetadataModel
from book_catalog.validation.author import validate_author

UNIQUE_FIELDS = ("name",)


class ListAuthorsCommand(
    BaseCommand[ListQuery, tuple[list[AuthorView], MetadataModel]]
):
    """Command to get one page of authors."""

    def __init__(self, repository: AuthorRepository):
        self.repository = repository

    async def execute(
        self, input_data: ListQuery
    ) -> tuple[list[AuthorView], MetadataModel]:
        authors, meta = await self.repository.paginate(input_data)
        return [AuthorView.from_model(a) for a in authors], meta


class GetAuthorCommand(BaseCommand[int, AuthorDetailView]):
    """Command to get a single author with their number of books."""

    def __init__(self, repository: AuthorRepository):
        self.repository = repository

    async def execute(self, author_id: int) -> AuthorDetailView:
        """
        Raises:
            NotFoundError: If author not found.
        """
        author = await self.repository.get_by_id(author_id)
        if not author:
            raise NotFoundError("Author not found")

        books_count = await self.repository.count_books(author_id)
        return AuthorDetailView.from_model(author, books_count=books_count)


class CreateAuthorCommand(BaseCommand[Mapping[str, Any], AuthorView]):
    """
    Command to create a new author.

    The author name must not be taken by another author.
    """

    def __init__(self, repository: AuthorRepository):
        """
        Initialize command with repository.

        Args:
            repository: Author repository for data access.
        """
        self.repository = repository

    async def execute(self, input_data: Mapping[str, Any]) -> AuthorView:
        """
        Execute command to create author.

        Args:
            input_data: Decoded request body.

        Returns:
            Created author with generated ID and timestamps.

        Raises:
            ValidationError: If a field rule fails or the name is taken.

        Example:
            ```python
            author = await command.execute({"name": "Dee Lestari"})
            print(f"Created author with ID: {author.id}")
            ```
        """
        data, errors = validate_author(input_data)
        if errors:
            errors += await find_unique_conflicts(
                self.repository, data, UNIQUE_FIELDS
            )
            raise ValidationError(errors)

        try:
            author = await self.repository.create(Author(**data))
        except IntegrityError:
            conflicts = await find_unique_conflicts(
                self.repository, data, UNIQUE_FIELDS
            )
            if not conflicts:
                raise
            logger.info(f"Rejected author create: {conflicts[0].message}")
            raise ValidationError(conflicts)

        return AuthorView.from_model(author)


class UpdateAuthorCommand(BaseCommand[UpdateInput, AuthorView]):
    """
    Command to partially update an existing author.

    Only supplied fields change. Keeping the current name is allowed.
    """

    def __init__(self, repository: AuthorRepository):
        self.repository = repository

    async def execute(self, input_data: UpdateInput) -> AuthorView:
        """
        Execute command to update author.

        Args:
            input_data: Author ID and the supplied fields.

        Returns:
            Updated author.

        Raises:
            NotFoundError: If author not found.
            ValidationError: If a field rule fails or the name is taken
                by another author.
        """
        author_id = input_data.id
        author = await self.repository.get_by_id(author_id)
        if not author:
            raise NotFoundError("Author not found")

        data, errors = validate_author(input_data.payload, partial=True)
        if errors:
            errors += await find_unique_conflicts(
                self.repository, data, UNIQUE_FIELDS, exclude_id=author_id
            )
            raise ValidationError(errors)

        for field, value in data.items():
            setattr(author, field, value)

        try:
            author = await self.repository.update(author)
        except IntegrityError:
            conflicts = await find_unique_conflicts(
                self.repository, data, UNIQUE_FIELDS, exclude_id=author_id
            )
            if not conflicts:
                raise
            logger.info(f"Rejected author update: {conflicts[0].message}")
            raise ValidationError(conflicts)

        return AuthorView.from_model(author)


class DeleteAuthorCommand(BaseCommand[int, None]):
    """Command to delete an author and all of their books."""

    def __init__(self, repository: AuthorRepository):
        self.repository = repository

    async def execute(self, author_id: int) -> None:
        """
        Execute command to delete author.

        Args:
            author_id: ID of author to delete.

        Raises:
            NotFoundError: If author not found.
        """
        author = await self.repository.get_by_id(author_id)
        if not author:
            raise NotFoundError("Author not found")

        await self.repository.delete(author)
