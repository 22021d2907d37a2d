"""
List request descriptors.

A list endpoint receives its search, filter, sort and page parameters as
raw query-string values. ``parse_list_query`` checks them against the
entity's ``ListingSpec`` allow-lists and returns a ``ListQuery`` that the
pagination pipeline can execute without further checks.

Policy for bad input: an unknown sort field, an order other than
``asc``/``desc``, a non-integer page, an unknown ``filter[...]`` key and
numbers beyond the INTEGER column range are all rejected with a 422
validation error. The parameters are checked by a pydantic model built
per entity (``list_params_model``). Missing or empty values fall back
to the defaults (default sort field, ``asc``, page 1); pages below 1 are
normalized to 1.

Example:
    >>> query = parse_list_query(
    ...     {"search": "b", "sort": "name", "order": "desc"}, AUTHOR_LISTING
    ... )
    >>> query.page
    1
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Annotated, Any, ClassVar, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    create_model,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from book_catalog.constants import MAX_RECORD_ID
from book_catalog.exceptions import ValidationError
from book_catalog.validation.rules import Blank, RecordId, field_errors

FILTER_PARAM = re.compile(r"^filter\[(?P<key>[^\]]*)\]$")

SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class ListingSpec:
    """
    Listing rules for one entity kind.

    Attributes:
        model: SQLModel table class being listed.
        search_field: Designated text field matched by ``search``.
        sortable_fields: Fields accepted by ``sort``.
        default_sort: Sort field used when ``sort`` is absent.
        filterable_fields: Fields accepted as ``filter[key]`` equality
            constraints. Values are integers (foreign keys).
        eager_load: Relationships loaded together with the page items.
    """

    model: Any
    search_field: str
    sortable_fields: tuple[str, ...]
    default_sort: str
    filterable_fields: tuple[str, ...] = ()
    eager_load: tuple[str, ...] = ()


@dataclass(frozen=True)
class ListQuery:
    """Validated list request descriptor."""

    search: str | None = None
    filters: dict[str, int] = field(default_factory=dict)
    sort: str = "id"
    order: SortOrder = "asc"
    page: int = 1

    @property
    def descending(self) -> bool:
        return self.order == "desc"


class ListParams(BaseModel):
    """
    Query-string parameters of a list endpoint.

    Subclassed per entity by ``list_params_model``, which binds the
    ``listing`` rules and adds the ``filter`` object.
    """

    listing: ClassVar[ListingSpec]

    search: Annotated[str | None, Blank] = None
    sort: Annotated[str | None, Blank] = None
    order: Annotated[str | None, Blank] = None
    page: Annotated[
        Annotated[int, Field(le=MAX_RECORD_ID)] | None, Blank
    ] = None

    @field_validator("sort")
    @classmethod
    def sortable(cls, v: str | None) -> str | None:
        allowed = cls.listing.sortable_fields
        if v is not None and v not in allowed:
            raise PydanticCustomError(
                "in",
                "Input should be one of: {allowed}",
                {"allowed": ", ".join(allowed)},
            )
        return v

    @field_validator("order")
    @classmethod
    def direction(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.lower()
        if v not in ("asc", "desc"):
            raise PydanticCustomError(
                "in",
                "Input should be one of: {allowed}",
                {"allowed": "asc, desc"},
            )
        return v


@lru_cache
def list_params_model(spec: ListingSpec) -> type[ListParams]:
    """Parameter model of one entity's list endpoint."""
    filters = create_model(
        f"{spec.model.__name__}ListFilters",
        __config__=ConfigDict(extra="forbid"),
        **{
            name: (Annotated[RecordId | None, Blank], None)
            for name in spec.filterable_fields
        },
    )

    class Params(ListParams):
        listing = spec
        filter: filters = Field(  # type: ignore[valid-type]
            default_factory=filters
        )

    return Params


def parse_list_query(
    params: Mapping[str, str], spec: ListingSpec
) -> ListQuery:
    """
    Build a ``ListQuery`` from raw query-string parameters.

    Args:
        params: Query parameters (e.g. ``request.query_params``).
        spec: Listing rules of the entity being listed.

    Returns:
        The validated request descriptor.

    Raises:
        ValidationError: If the sort field, order, page or a filter is
            invalid. All problems are reported together.
    """
    raw: dict[str, Any] = {
        name: params[name]
        for name in ("search", "sort", "order", "page")
        if name in params
    }

    # Both "filter[author_id]=1" and the bare "author_id=1" are accepted
    filters: dict[str, Any] = {}
    for key, value in params.items():
        if match := FILTER_PARAM.match(key):
            filters[match.group("key")] = value
        elif key in spec.filterable_fields:
            filters.setdefault(key, value)

    try:
        parsed = list_params_model(spec).model_validate(
            {**raw, "filter": filters}
        )
    except PydanticValidationError as ex:
        raise ValidationError(field_errors(ex.errors())) from ex

    filters_given = parsed.filter.model_dump()  # type: ignore[attr-defined]
    return ListQuery(
        search=parsed.search,
        filters={
            name: value
            for name, value in filters_given.items()
            if value is not None
        },
        sort=parsed.sort or spec.default_sort,
        order=parsed.order or "asc",  # type: ignore[arg-type]
        page=max(parsed.page or 1, 1),
    )
