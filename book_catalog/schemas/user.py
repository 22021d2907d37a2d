from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class UserModel(BaseModel):  # type: ignore[misc]
    """
    Logged in user, built from the claims of a decoded access token.

    Claims are read through validation aliases, so the model serializes
    with its own field names (``id``, ``name``, ``email``...) and can be
    validated again from that output.
    """

    id: str = Field(..., validation_alias=AliasChoices("sub", "id"))
    expired_in: int = Field(
        ..., validation_alias=AliasChoices("exp", "expired_in")
    )  # timestamp when keycloak session expires
    username: str = Field(
        ..., validation_alias=AliasChoices("preferred_username", "username")
    )
    name: str | None = None
    email: str | None = None
    roles: list[str] = []

    def __init__(self, **kwargs: Any) -> None:
        # Get client roles
        if "resource_access" in kwargs:
            kwargs["roles"] = (
                kwargs["resource_access"]
                .get(kwargs.get("azp", ""), {})
                .get("roles", [])
            )
        kwargs.setdefault("name", kwargs.get("preferred_username"))

        super(UserModel, self).__init__(**kwargs)

    @property
    def is_authenticated(self) -> bool:
        return True


class TokenResponse(BaseModel):  # type: ignore[misc]
    """Body returned by ``/login`` and ``/register``."""

    user: UserModel
    token: str
    refresh_token: str | None = None
