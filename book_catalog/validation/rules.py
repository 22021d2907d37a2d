"""
Field types and error messages shared by the input models.

Write payloads are validated with one pydantic model per entity and action
(``AuthorCreate``, ``BookUpdate``...). The annotated types below carry the
catalog's input conventions:

- strings are trimmed, and an empty string counts as null
- a ``Required`` field rejects null and blank values, not only absence
- update models default every field to None, so only the supplied fields
  are validated and written

``field_errors`` turns pydantic's error list into ``FieldError`` objects
with the catalog's messages, e.g. ``string_too_long`` on ``name`` becomes
``"The name field must not be greater than 100 characters."``.

Example:
    >>> data, errors = validate_input(
    ...     AuthorCreate, {"name": " Tere Liye ", "birth_date": "x"},
    ...     partial=AuthorUpdate,
    ... )
    >>> data
    {'name': 'Tere Liye'}
    >>> [e.rule for e in errors]
    ['date']
"""

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationInfo,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.networks import validate_email
from pydantic_core import ErrorDetails, PydanticCustomError

from book_catalog.constants import MAX_RECORD_ID
from book_catalog.schemas.errors import FieldError

# Error type -> (rule name, message template). Templates are formatted with
# the field's ``attribute`` name, its last location ``key`` and the error's
# ``ctx`` values.
_REQUIRED = ("required", "The {attribute} field is required.")
_INTEGER = ("integer", "The {attribute} field must be an integer.")
_DATE = ("date", "The {attribute} field must be a valid date.")

RULE_MESSAGES: dict[str, tuple[str, str]] = {
    "missing": _REQUIRED,
    "required": _REQUIRED,
    "string_type": ("string", "The {attribute} field must be a string."),
    "string_too_short": (
        "min",
        "The {attribute} field must be at least {min_length} characters.",
    ),
    "string_too_long": (
        "max",
        "The {attribute} field must not be greater than {max_length} "
        "characters.",
    ),
    "size": ("size", "The {attribute} field must be {size} characters."),
    "int_type": _INTEGER,
    "int_parsing": _INTEGER,
    "int_parsing_size": _INTEGER,
    "int_from_float": _INTEGER,
    "greater_than_equal": (
        "min",
        "The {attribute} field must be at least {ge}.",
    ),
    "less_than_equal": (
        "max",
        "The {attribute} field must not be greater than {le}.",
    ),
    "date_type": _DATE,
    "date_parsing": _DATE,
    "date_from_datetime_parsing": _DATE,
    "date_from_datetime_inexact": _DATE,
    "email": ("email", "The {attribute} field must be a valid email address."),
    "confirmed": (
        "confirmed",
        "The {attribute} field confirmation does not match.",
    ),
    "in": (
        "in",
        "The selected {attribute} is invalid. Allowed values: {allowed}.",
    ),
    # Only the list filters forbid unknown keys
    "extra_forbidden": ("filterable", "The filter '{key}' is not supported."),
}


def attribute_name(field: str) -> str:
    """Human-readable name of a field, e.g. ``birth_date`` -> ``birth date``."""
    return field.replace("_", " ")


def unique_error(field: str) -> FieldError:
    return FieldError(
        field=field,
        rule="unique",
        message=f"The {attribute_name(field)} has already been taken.",
    )


def exists_error(field: str) -> FieldError:
    return FieldError(
        field=field,
        rule="exists",
        message=f"The selected {attribute_name(field)} is invalid.",
    )


def field_errors(
    errors: Sequence[ErrorDetails], skip: int = 0
) -> list[FieldError]:
    """
    Translate pydantic errors into catalog field errors.

    Args:
        errors: ``ValidationError.errors()`` of pydantic or FastAPI.
        skip: Number of leading location parts to drop, e.g. 1 for
            FastAPI's ``("body", ...)``/``("path", ...)`` prefixes.

    Returns:
        One ``FieldError`` per pydantic error, in the same order. Error
        types without a catalog message keep pydantic's own message.
    """
    result = []
    for error in errors:
        location = [str(part) for part in error["loc"][skip:]]
        field = ".".join(location) or "body"
        rule, template = RULE_MESSAGES.get(error["type"], (error["type"], ""))
        if template:
            message = template.format(
                **{
                    **error.get("ctx", {}),
                    "attribute": attribute_name(field),
                    "key": location[-1] if location else field,
                }
            )
        else:
            message = error["msg"]
        result.append(FieldError(field=field, rule=rule, message=message))
    return result


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    return value


def require(value: Any) -> Any:
    value = blank_to_none(value)
    if value is None:
        raise PydanticCustomError("required", "Field required")
    return value


def exact_length(size: int) -> AfterValidator:
    """Validator for strings of exactly ``size`` characters."""

    def check(value: str) -> str:
        if len(value) != size:
            raise PydanticCustomError(
                "size",
                "String should have exactly {size} characters",
                {"size": size},
            )
        return value

    return AfterValidator(check)


def _email_address(value: str) -> str:
    try:
        _, email = validate_email(value)
    except PydanticCustomError as e:
        raise PydanticCustomError(
            "email", "Not a valid email address: {reason}", {"reason": str(e)}
        ) from e
    return email


def reference_year(info: ValidationInfo) -> int:
    """Year of the ``today`` date passed as validation context."""
    today = (info.context or {}).get("today") or date.today()
    return today.year


def year_at_most(value: int | None, limit: int) -> int | None:
    if value is not None and value > limit:
        raise PydanticCustomError(
            "less_than_equal",
            "Input should be less than or equal to {le}",
            {"le": limit},
        )
    return value


Required = BeforeValidator(require)
Blank = BeforeValidator(blank_to_none)

RecordId = Annotated[int, Field(ge=1, le=MAX_RECORD_ID)]
Email = Annotated[str, Field(max_length=255), AfterValidator(_email_address)]


class InputModel(BaseModel):
    """Base of the write payload models; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


def cleaned_data(instance: BaseModel) -> dict[str, Any]:
    """Values of the fields that were present in the payload."""
    return instance.model_dump(include=instance.model_fields_set)


def validate_input(
    model: type[InputModel],
    payload: Mapping[str, Any],
    *,
    partial: type[InputModel] | None = None,
    context: dict[str, Any] | None = None,
) -> tuple[dict[str, Any], list[FieldError]]:
    """
    Validate a payload with ``model``.

    When some fields are invalid, the remaining supplied fields are still
    cleaned with the ``partial`` model, so the write commands can run their
    database checks on them and report everything at once.

    Args:
        model: Model for the action (create or update).
        payload: Decoded request body.
        partial: Update model of the same entity.
        context: Validation context, e.g. ``{"today": date(...)}``.

    Returns:
        Tuple of (cleaned data of the supplied valid fields, field errors).
    """
    try:
        instance = model.model_validate(payload, context=context)
    except PydanticValidationError as ex:
        errors = field_errors(ex.errors())
        if partial is None:
            return {}, errors

        invalid = {error.field for error in errors}
        remaining = {k: v for k, v in payload.items() if k not in invalid}
        valid = partial.model_validate(remaining, context=context)
        return cleaned_data(valid), errors

    return cleaned_data(instance), []
