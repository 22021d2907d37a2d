"""
Error models returned by the HTTP API.

Every failure is rendered as a JSON object with a human-readable
``message``. Validation failures additionally carry ``errors``, a mapping of
field name to the list of messages for that field:

    {
        "message": "The name field is required. (and 1 more error)",
        "errors": {
            "name": ["The name field is required."],
            "pages": ["The pages field must be at least 1."]
        }
    }
"""

from pydantic import BaseModel, ConfigDict, Field


class FieldError(BaseModel):  # type: ignore[misc]
    """
    A single rule violation on one input field.

    Attributes:
        field: Name of the offending input field.
        rule: Machine-readable rule name (``required``, ``max``, ``unique``...).
        message: Human-readable description shown to the user.
    """

    model_config = ConfigDict(frozen=True)

    field: str
    rule: str
    message: str


class MessageResponse(BaseModel):  # type: ignore[misc]
    message: str = Field(..., description="Human-readable message")


class ValidationErrorResponse(MessageResponse):
    errors: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Field name to list of error messages",
    )


def group_field_errors(errors: list[FieldError]) -> dict[str, list[str]]:
    """
    Group field errors by field, keeping the order in which they were found.

    Args:
        errors: Flat list of field errors.

    Returns:
        Mapping of field name to its messages.
    """
    grouped: dict[str, list[str]] = {}
    for error in errors:
        grouped.setdefault(error.field, []).append(error.message)
    return grouped


def summarize_field_errors(errors: list[FieldError]) -> str:
    """
    Build the top-level message for a set of field errors.

    The first message is used verbatim and the number of remaining errors is
    appended, e.g. ``"The name field is required. (and 2 more errors)"``.
    """
    if not errors:
        return "The given data was invalid."

    message = errors[0].message
    remaining = len(errors) - 1
    if remaining:
        plural = "error" if remaining == 1 else "errors"
        message = f"{message} (and {remaining} more {plural})"
    return message
