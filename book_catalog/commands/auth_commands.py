"""
Commands for the login, registration and logout endpoints.

Credentials are checked and tokens issued by Keycloak; these commands only
validate the request body and translate Keycloak's answers.
"""

from typing import Any, Mapping

from jwcrypto.jwt import JWTExpired
from keycloak.exceptions import (
    KeycloakAuthenticationError,
    KeycloakError,
    KeycloakPostError,
)

from book_catalog.commands.base import BaseCommand
from book_catalog.exceptions import (
    AuthenticationError,
    IdentityProviderError,
    ValidationError,
)
from book_catalog.logging import logger
from book_catalog.managers.keycloak_manager import KeycloakManager
from book_catalog.schemas.user import TokenResponse, UserModel
from book_catalog.validation.auth import (
    validate_login,
    validate_logout,
    validate_registration,
)
from book_catalog.validation.rules import unique_error


async def issue_tokens(
    kc_manager: KeycloakManager, email: str, password: str
) -> TokenResponse:
    """
    Log in to Keycloak and describe the session.

    Raises:
        AuthenticationError: If Keycloak rejects the credentials.
        IdentityProviderError: If Keycloak fails otherwise, or issues a
            token that cannot be decoded.
    """
    try:
        token = await kc_manager.login_async(email, password)
        user_data = await kc_manager.decode_token(token["access_token"])
    except (JWTExpired, ValueError) as ex:
        logger.error(f"Keycloak issued an unusable token for {email}: {ex}")
        raise IdentityProviderError("Authentication service unavailable")
    except KeycloakAuthenticationError as ex:
        logger.warning(f"Login failed for {email}: {ex}")
        raise AuthenticationError("Invalid credentials")
    except KeycloakError as ex:
        logger.error(f"Keycloak login error: {ex}")
        raise IdentityProviderError("Authentication service unavailable")

    return TokenResponse(
        user=UserModel(**user_data),
        token=token["access_token"],
        refresh_token=token.get("refresh_token"),
    )


class LoginCommand(BaseCommand[Mapping[str, Any], TokenResponse]):
    def __init__(self, kc_manager: KeycloakManager):
        self.kc_manager = kc_manager

    async def execute(self, input_data: Mapping[str, Any]) -> TokenResponse:
        data, errors = validate_login(input_data)
        if errors:
            raise ValidationError(errors)

        return await issue_tokens(
            self.kc_manager, data["email"], data["password"]
        )


class RegisterCommand(BaseCommand[Mapping[str, Any], TokenResponse]):
    """
    Command to create an account and log it in.

    Raises:
        ValidationError: If the body is invalid or the e-mail is already
            registered.
    """

    def __init__(self, kc_manager: KeycloakManager):
        self.kc_manager = kc_manager

    async def execute(self, input_data: Mapping[str, Any]) -> TokenResponse:
        data, errors = validate_registration(input_data)
        if errors:
            raise ValidationError(errors)

        try:
            user_id = await self.kc_manager.register_async(
                data["name"], data["email"], data["password"]
            )
        except KeycloakPostError as ex:
            if ex.response_code == 409:
                raise ValidationError([unique_error("email")])
            logger.error(f"Keycloak registration error: {ex}")
            raise IdentityProviderError("Authentication service unavailable")

        logger.info(f"Registered user {user_id}")

        return await issue_tokens(
            self.kc_manager, data["email"], data["password"]
        )


class LogoutCommand(BaseCommand[Mapping[str, Any], None]):
    """
    Command to end the Keycloak session behind a refresh token.

    Raises:
        ValidationError: If ``refresh_token`` is missing.
        AuthenticationError: If Keycloak rejects the token.
    """

    def __init__(self, kc_manager: KeycloakManager):
        self.kc_manager = kc_manager

    async def execute(self, input_data: Mapping[str, Any]) -> None:
        data, errors = validate_logout(input_data)
        if errors:
            raise ValidationError(errors)

        try:
            await self.kc_manager.logout_async(data["refresh_token"])
        except KeycloakError as ex:
            logger.warning(f"Keycloak logout error: {ex}")
            raise AuthenticationError("Invalid refresh token")
