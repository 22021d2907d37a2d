"""
Commands for Publisher business operations.

Publishers mirror authors: a unique name, a books count on the detail
view, and cascade deletion of their books.
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
from book_catalog.models.publisher import Publisher
from book_catalog.repositories.publisher_repository import PublisherRepository
from book_catalog.schemas.publisher import PublisherDetailView, PublisherView
from book_catalog.schemas.listing import ListQuery
from book_catalog.schemas.response import MetadataModel
from book_catalog.validation.publisher import validate_publisher

UNIQUE_FIELDS = ("name",)


class ListPublishersCommand(
    BaseCommand[ListQuery, tuple[list[PublisherView], MetadataModel]]
):
    """Command to get one page of publishers."""

    def __init__(self, repository: PublisherRepository):
        self.repository = repository

    async def execute(
        self, input_data: ListQuery
    ) -> tuple[list[PublisherView], MetadataModel]:
        publishers, meta = await self.repository.paginate(input_data)
        return [PublisherView.from_model(a) for a in publishers], meta


class GetPublisherCommand(BaseCommand[int, PublisherDetailView]):
    """Command to get a single publisher with its number of books."""

    def __init__(self, repository: PublisherRepository):
        self.repository = repository

    async def execute(self, publisher_id: int) -> PublisherDetailView:
        """
        Raises:
            NotFoundError: If publisher not found.
        """
        publisher = await self.repository.get_by_id(publisher_id)
        if not publisher:
            raise NotFoundError("Publisher not found")

        books_count = await self.repository.count_books(publisher_id)
        return PublisherDetailView.from_model(publisher, books_count=books_count)


class CreatePublisherCommand(BaseCommand[Mapping[str, Any], PublisherView]):
    """
    Command to create a new publisher.

    The publisher name must not be taken by another publisher.
    """

    def __init__(self, repository: PublisherRepository):
        self.repository = repository

    async def execute(self, input_data: Mapping[str, Any]) -> PublisherView:
        data, errors = validate_publisher(input_data)
        if errors:
            errors += await find_unique_conflicts(
                self.repository, data, UNIQUE_FIELDS
            )
            raise ValidationError(errors)

        try:
            publisher = await self.repository.create(Publisher(**data))
        except IntegrityError:
            conflicts = await find_unique_conflicts(
                self.repository, data, UNIQUE_FIELDS
            )
            if not conflicts:
                raise
            logger.info(f"Rejected publisher create: {conflicts[0].message}")
            raise ValidationError(conflicts)

        return PublisherView.from_model(publisher)


class UpdatePublisherCommand(BaseCommand[UpdateInput, PublisherView]):
    """
    Command to partially update an existing publisher.

    Only supplied fields change. Keeping the current name is allowed.
    """

    def __init__(self, repository: PublisherRepository):
        self.repository = repository

    async def execute(self, input_data: UpdateInput) -> PublisherView:
        """
        Execute command to update publisher.

        Args:
            input_data: Publisher ID and the supplied fields.

        Returns:
            Updated publisher.

        Raises:
            NotFoundError: If publisher not found.
            ValidationError: If a field rule fails or the name is taken
                by another publisher.
        """
        publisher_id = input_data.id
        publisher = await self.repository.get_by_id(publisher_id)
        if not publisher:
            raise NotFoundError("Publisher not found")

        data, errors = validate_publisher(input_data.payload, partial=True)
        if errors:
            errors += await find_unique_conflicts(
                self.repository, data, UNIQUE_FIELDS, exclude_id=publisher_id
            )
            raise ValidationError(errors)

        for field, value in data.items():
            setattr(publisher, field, value)

        try:
            publisher = await self.repository.update(publisher)
        except IntegrityError:
            conflicts = await find_unique_conflicts(
                self.repository, data, UNIQUE_FIELDS, exclude_id=publisher_id
            )
            if not conflicts:
                raise
            logger.info(f"Rejected publisher update: {conflicts[0].message}")
            raise ValidationError(conflicts)

        return PublisherView.from_model(publisher)


class DeletePublisherCommand(BaseCommand[int, None]):
    """Command to delete an publisher and all of its books."""

    def __init__(self, repository: PublisherRepository):
        self.repository = repository

    async def execute(self, publisher_id: int) -> None:
        """
        Execute command to delete publisher.

        Args:
            publisher_id: ID of publisher to delete.

        Raises:
            NotFoundError: If publisher not found.
        """
        publisher = await self.repository.get_by_id(publisher_id)
        if not publisher:
            raise NotFoundError("Publisher not found")

        await self.repository.delete(publisher)
