"""
Account endpoints: login, registration, logout and the current user.

``/login`` and ``/register`` are public; ``/logout`` and ``/user`` need a
bearer token. The dashboard sends the returned ``token`` as
``Authorization: Bearer <token>`` on every other request.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, status

from book_catalog.auth import CurrentUserDep
from book_catalog.commands.auth_commands import (
    LoginCommand,
    LogoutCommand,
    RegisterCommand,
)
from book_catalog.dependencies import KeycloakDep
from book_catalog.schemas.errors import MessageResponse
from book_catalog.schemas.user import TokenResponse, UserModel

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=TokenResponse, summary="Log in")
async def login(
    payload: Annotated[dict[str, Any], Body()], kc_manager: KeycloakDep
) -> TokenResponse:
    """
    Exchange e-mail and password for tokens.

    Example:
        POST /login
        {"email": "admin@example.com", "password": "password"}
    """
    return await LoginCommand(kc_manager).execute(payload)


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
async def register(
    payload: Annotated[dict[str, Any], Body()], kc_manager: KeycloakDep
) -> TokenResponse:
    return await RegisterCommand(kc_manager).execute(payload)


@router.post("/logout", response_model=MessageResponse, summary="Log out")
async def logout(
    payload: Annotated[dict[str, Any], Body()],
    user: CurrentUserDep,
    kc_manager: KeycloakDep,
) -> MessageResponse:
    await LogoutCommand(kc_manager).execute(payload)
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=UserModel, summary="Current user")
async def current_user(user: CurrentUserDep) -> UserModel:
    return user
