"""Input models for Author writes."""

from datetime import date
from typing import Annotated, Any, Mapping

from pydantic import Field

from book_catalog.schemas.errors import FieldError
from book_catalog.validation.rules import (
    Blank,
    InputModel,
    Required,
    validate_input,
)

AuthorName = Annotated[str, Field(max_length=100), Required]


class AuthorCreate(InputModel):
    name: AuthorName
    birth_date: Annotated[date | None, Blank] = None
    nationality: Annotated[
        Annotated[str, Field(max_length=50)] | None, Blank
    ] = None
    biography: Annotated[
        Annotated[str, Field(max_length=2000)] | None, Blank
    ] = None


class AuthorUpdate(AuthorCreate):
    name: AuthorName = None  # type: ignore[assignment]


def validate_author(
    payload: Mapping[str, Any], *, partial: bool = False
) -> tuple[dict[str, Any], list[FieldError]]:
    """
    Check an author payload against the field rules.

    Uniqueness of ``name`` needs the database and is checked by the
    write commands.

    Args:
        payload: Decoded request body.
        partial: Validate only the supplied fields (update).

    Returns:
        Tuple of (cleaned data, field errors).
    """
    return validate_input(
        AuthorUpdate if partial else AuthorCreate,
        payload,
        partial=AuthorUpdate,
    )
