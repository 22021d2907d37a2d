"""
Base command for encapsulating business operations.

The Command pattern encapsulates business logic as objects, making it
easy to test in isolation: a command only depends on repositories, never
on the HTTP layer.

Write commands share one flow:

1. Run the entity's field rules over the payload.
2. If any rule fails, also run the database checks (uniqueness, foreign
   keys) for the fields that passed, and report everything together.
3. Otherwise write. Uniqueness and foreign keys are enforced by the
   database constraints during the write itself; when the write fails
   with an ``IntegrityError`` the same database checks explain which
   fields caused it.

Example:
    ```python
    class CreateAuthorCommand(BaseCommand[Mapping[str, Any], AuthorView]):
        def __init__(self, repository: AuthorRepository):
            self.repository = repository

        async def execute(self, input_data: Mapping[str, Any]) -> AuthorView:
            data, errors = validate_author(input_data)
            ...
    ```
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Sequence, TypeVar

from pydantic import BaseModel, Field

from book_catalog.repositories.base import BaseRepository
from book_catalog.schemas.errors import FieldError
from book_catalog.validation.rules import unique_error

TInput = TypeVar("TInput")
TOutput = TypeVar("TOutput")


class UpdateInput(BaseModel):  # type: ignore[misc]
    """Input model for partial updates."""

    id: int = Field(..., description="ID of the record to update")
    payload: dict[str, Any] = Field(
        default_factory=dict, description="Supplied fields only"
    )


class BaseCommand(ABC, Generic[TInput, TOutput]):
    """
    Base command for business operations.

    Type Parameters:
        TInput: Input data type.
        TOutput: Output data type.
    """

    @abstractmethod
    async def execute(self, input_data: TInput) -> TOutput:
        """
        Execute the command.

        Args:
            input_data: Input data for the command.

        Returns:
            Result of the command execution.

        Raises:
            ValidationError: If the input breaks a field rule.
            NotFoundError: If the addressed record does not exist.
        """
        pass


async def find_unique_conflicts(
    repository: BaseRepository[Any],
    data: dict[str, Any],
    unique_fields: Sequence[str],
    exclude_id: int | None = None,
) -> list[FieldError]:
    """
    Report unique fields whose new value is held by another row.

    Args:
        repository: Repository of the entity being written.
        data: Cleaned values about to be written.
        unique_fields: Fields backed by a unique constraint.
        exclude_id: ID of the row being updated.

    Returns:
        One ``unique`` error per conflicting field.
    """
    errors: list[FieldError] = []
    for field in unique_fields:
        value = data.get(field)
        if value is None:
            continue
        if await repository.is_taken(field, value, exclude_id=exclude_id):
            errors.append(unique_error(field))
    return errors
