"""Input models for the login, registration and logout endpoints."""

from typing import Annotated, Any, Mapping

from pydantic import Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from book_catalog.schemas.errors import FieldError
from book_catalog.validation.rules import (
    Blank,
    Email,
    InputModel,
    Required,
    validate_input,
)


class LoginInput(InputModel):
    email: Annotated[Email, Required]
    password: Annotated[str, Required]


class RegistrationInput(InputModel):
    """
    Sign-up payload.

    The password must be at least 8 characters and repeated in
    ``password_confirmation``. Whether the e-mail is still free is decided
    by the identity provider when the account is created.
    """

    name: Annotated[str, Field(max_length=255), Required]
    email: Annotated[Email, Required]
    # Declared before ``password`` so its validator can compare them
    password_confirmation: Annotated[Any, Blank] = Field(
        default=None, exclude=True
    )
    password: Annotated[str, Field(min_length=8), Required]

    @field_validator("password")
    @classmethod
    def confirmed(cls, v: str, info: ValidationInfo) -> str:
        if info.data.get("password_confirmation") != v:
            raise PydanticCustomError(
                "confirmed", "Password confirmation does not match"
            )
        return v


class LogoutInput(InputModel):
    refresh_token: Annotated[str, Required]


def validate_login(
    payload: Mapping[str, Any],
) -> tuple[dict[str, Any], list[FieldError]]:
    return validate_input(LoginInput, payload)


def validate_registration(
    payload: Mapping[str, Any],
) -> tuple[dict[str, Any], list[FieldError]]:
    return validate_input(RegistrationInput, payload)


def validate_logout(
    payload: Mapping[str, Any],
) -> tuple[dict[str, Any], list[FieldError]]:
    return validate_input(LogoutInput, payload)
