"""Input models for Publisher writes."""

from datetime import date
from typing import Annotated, Any, Mapping

from pydantic import Field, ValidationInfo, field_validator

from book_catalog.schemas.errors import FieldError
from book_catalog.validation.rules import (
    Blank,
    InputModel,
    Required,
    reference_year,
    validate_input,
    year_at_most,
)

PublisherName = Annotated[str, Field(max_length=100), Required]


class PublisherCreate(InputModel):
    name: PublisherName
    city: Annotated[Annotated[str, Field(max_length=100)] | None, Blank] = None
    established_year: Annotated[
        Annotated[int, Field(ge=1000)] | None, Blank
    ] = None

    @field_validator("established_year")
    @classmethod
    def not_in_future(cls, v: int | None, info: ValidationInfo) -> int | None:
        return year_at_most(v, reference_year(info))


class PublisherUpdate(PublisherCreate):
    name: PublisherName = None  # type: ignore[assignment]


def validate_publisher(
    payload: Mapping[str, Any],
    *,
    partial: bool = False,
    today: date | None = None,
) -> tuple[dict[str, Any], list[FieldError]]:
    """
    Check a publisher payload against the field rules.

    Args:
        payload: Decoded request body.
        partial: Validate only the supplied fields (update).
        today: Reference date for the ``established_year`` upper bound.

    Returns:
        Tuple of (cleaned data, field errors).
    """
    return validate_input(
        PublisherUpdate if partial else PublisherCreate,
        payload,
        partial=PublisherUpdate,
        context={"today": today},
    )
