"""Input models for Book writes."""

from datetime import date
from typing import Annotated, Any, Mapping

from pydantic import Field, ValidationInfo, field_validator

from book_catalog.schemas.errors import FieldError
from book_catalog.validation.rules import (
    Blank,
    InputModel,
    RecordId,
    Required,
    exact_length,
    reference_year,
    validate_input,
    year_at_most,
)

ISBN_LENGTH = 13

# Forthcoming titles may be catalogued this many years ahead
PUBLISHED_YEAR_LEAD = 5

BookTitle = Annotated[str, Field(max_length=200), Required]
Reference = Annotated[RecordId, Required]


class BookCreate(InputModel):
    """
    Fields of a new book.

    ``author_id`` and ``publisher_id`` are only checked to be IDs here;
    whether they point at existing rows is decided by the write commands,
    together with ``isbn`` uniqueness.
    """

    title: BookTitle
    isbn: Annotated[
        Annotated[str, exact_length(ISBN_LENGTH)] | None, Blank
    ] = None
    published_year: Annotated[
        Annotated[int, Field(ge=1000)] | None, Blank
    ] = None
    pages: Annotated[
        Annotated[int, Field(ge=1, le=9999)] | None, Blank
    ] = None
    synopsis: Annotated[
        Annotated[str, Field(max_length=5000)] | None, Blank
    ] = None
    author_id: Reference
    publisher_id: Reference

    @field_validator("published_year")
    @classmethod
    def not_too_far_ahead(
        cls, v: int | None, info: ValidationInfo
    ) -> int | None:
        return year_at_most(v, reference_year(info) + PUBLISHED_YEAR_LEAD)


class BookUpdate(BookCreate):
    title: BookTitle = None  # type: ignore[assignment]
    author_id: Reference = None  # type: ignore[assignment]
    publisher_id: Reference = None  # type: ignore[assignment]


def validate_book(
    payload: Mapping[str, Any],
    *,
    partial: bool = False,
    today: date | None = None,
) -> tuple[dict[str, Any], list[FieldError]]:
    """
    Check a book payload against the field rules.

    Args:
        payload: Decoded request body.
        partial: Validate only the supplied fields (update).
        today: Reference date for the ``published_year`` upper bound.

    Returns:
        Tuple of (cleaned data, field errors).
    """
    return validate_input(
        BookUpdate if partial else BookCreate,
        payload,
        partial=BookUpdate,
        context={"today": today},
    )
