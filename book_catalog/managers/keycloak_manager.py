from typing import Any

from keycloak import KeycloakAdmin, KeycloakOpenID

from book_catalog.settings import Settings, app_settings


class KeycloakManager:
    """
    Manager for Keycloak authentication operations.

    Wraps the OpenID Connect client used to issue, decode and revoke
    tokens, and the admin client used to register new accounts. All calls
    use the native async methods of python-keycloak.

    Instances are created through ``book_catalog.dependencies``, never as
    module globals, so tests can swap them out.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """
        Initialize the OpenID Connect client.

        Args:
            settings: Application settings; defaults to ``app_settings``.
        """
        self.settings = settings or app_settings
        self.openid = KeycloakOpenID(
            server_url=f"{self.settings.KEYCLOAK_BASE_URL.rstrip('/')}/",
            client_id=self.settings.KEYCLOAK_CLIENT_ID,
            realm_name=self.settings.KEYCLOAK_REALM,
        )
        self._admin: KeycloakAdmin | None = None

    @property
    def admin(self) -> KeycloakAdmin:
        """Admin client, created on first use."""
        if self._admin is None:
            self._admin = KeycloakAdmin(
                server_url=f"{self.settings.KEYCLOAK_BASE_URL.rstrip('/')}/",
                username=self.settings.KEYCLOAK_ADMIN_USERNAME,
                password=self.settings.KEYCLOAK_ADMIN_PASSWORD.get_secret_value(),
                realm_name=self.settings.KEYCLOAK_REALM,
                user_realm_name="master",
            )
        return self._admin

    async def login_async(
        self, username: str, password: str
    ) -> dict[str, Any]:
        """
        Authenticate a user and obtain tokens.

        Args:
            username: Username or e-mail of the user.
            password: The password of the user to authenticate.

        Returns:
            Token dictionary containing access_token, refresh_token,
            expires_in, etc.

        Raises:
            KeycloakAuthenticationError: If authentication fails.

        Example:
            >>> kc_manager = KeycloakManager()
            >>> token = await kc_manager.login_async("user@example.com", "pass")
            >>> access_token = token["access_token"]
        """
        return await self.openid.a_token(username=username, password=password)

    async def decode_token(self, access_token: str) -> dict[str, Any]:
        """
        Verify an access token and return its claims.

        Raises:
            JWTExpired: If the token has expired.
            ValueError: If the token cannot be decoded.
        """
        return await self.openid.a_decode_token(access_token)

    async def logout_async(self, refresh_token: str) -> None:
        """End the Keycloak session that issued ``refresh_token``."""
        await self.openid.a_logout(refresh_token)

    async def register_async(self, name: str, email: str, password: str) -> str:
        """
        Create an enabled account that can log in with its e-mail.

        Args:
            name: Display name, stored as the first name.
            email: E-mail address, also used as the username.
            password: Initial, non-temporary password.

        Returns:
            ID of the created Keycloak user.

        Raises:
            KeycloakPostError: If the account cannot be created; the
                response code is 409 when the e-mail is already registered.
        """
        return await self.admin.a_create_user(
            {
                "username": email,
                "email": email,
                "firstName": name,
                "enabled": True,
                "emailVerified": True,
                "credentials": [
                    {"type": "password", "value": password, "temporary": False}
                ],
            },
            exist_ok=False,
        )
