from typing import Annotated

from fastapi import Depends
from fastapi.responses import JSONResponse
from fastapi.security.utils import get_authorization_scheme_param
from jwcrypto.jwt import JWTExpired
from keycloak.exceptions import KeycloakAuthenticationError, KeycloakError
from starlette.authentication import (
    AuthCredentials,
    AuthenticationBackend,
)
from starlette.authentication import (
    AuthenticationError as StarletteAuthenticationError,
)
from starlette.requests import HTTPConnection, Request

from book_catalog.dependencies import get_keycloak_manager
from book_catalog.exceptions import AuthenticationError
from book_catalog.logging import logger, set_log_context
from book_catalog.schemas.errors import MessageResponse
from book_catalog.schemas.user import UserModel
from book_catalog.settings import app_settings


class TokenAuthenticationError(StarletteAuthenticationError):
    """
    Raised by ``AuthBackend`` when a bearer token is rejected.

    Attributes:
        reason: A machine-readable error code (e.g. 'token_expired')
        detail: Human-readable error details
    """

    def __init__(self, reason: str, detail: str) -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}")


class AuthBackend(AuthenticationBackend):  # type: ignore[misc]
    """
    Authentication backend validating Keycloak bearer tokens.

    Requests to excluded paths and requests without a token pass through
    unauthenticated; protected endpoints reject them through the
    ``get_current_user`` dependency. A token that is present but invalid
    fails the request immediately.

    Raises:
        TokenAuthenticationError: When the token is rejected:
            - Expired JWT tokens (reason='token_expired')
            - Rejected by Keycloak (reason='invalid_credentials')
            - Token decoding errors (reason='token_decode_error')
    """

    def __init__(self) -> None:
        self.excluded_paths = app_settings.EXCLUDED_PATHS

    async def authenticate(  # type: ignore[override]
        self, conn: HTTPConnection
    ) -> tuple[AuthCredentials, UserModel] | None:
        if self.excluded_paths.match(conn.url.path):
            return None

        scheme, access_token = get_authorization_scheme_param(
            conn.headers.get("authorization", "")
        )
        if scheme.lower() != "bearer" or not access_token:
            return None

        try:
            kc_manager = get_keycloak_manager()
            user_data = await kc_manager.decode_token(access_token)
            user = UserModel(**user_data)

        except JWTExpired as ex:
            logger.error(f"JWT token expired: {ex}")
            raise TokenAuthenticationError("token_expired", str(ex))

        except KeycloakAuthenticationError as ex:
            logger.error(f"Invalid credentials: {ex}")
            raise TokenAuthenticationError("invalid_credentials", str(ex))

        except (ValueError, KeycloakError) as ex:
            logger.error(f"Error occurred while decode auth token: {ex}")
            raise TokenAuthenticationError("token_decode_error", str(ex))

        set_log_context(user_id=user.id)

        return AuthCredentials(["authenticated", *user.roles]), user


def on_auth_error(conn: HTTPConnection, exc: Exception) -> JSONResponse:
    """Render a rejected token as the API's 401 body."""
    return JSONResponse(
        status_code=AuthenticationError.http_status,
        content=MessageResponse(message="Unauthenticated.").model_dump(),
    )


def get_current_user(request: Request) -> UserModel:
    """
    Return the authenticated user of the request.

    Raises:
        AuthenticationError: If the request carries no valid bearer token.
    """
    user = request.user
    if not user.is_authenticated:
        raise AuthenticationError()
    return user


CurrentUserDep = Annotated[UserModel, Depends(get_current_user)]
