"""
Tests for authentication: the bearer token backend, the account
endpoints and the Keycloak manager.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from jwcrypto.jwt import JWTExpired
from keycloak.exceptions import (
    KeycloakAuthenticationError,
    KeycloakConnectionError,
    KeycloakPostError,
)
from starlette.authentication import AuthCredentials

from book_catalog.auth import AuthBackend, TokenAuthenticationError
from book_catalog.commands.auth_commands import LogoutCommand
from book_catalog.exceptions import ValidationError
from book_catalog.schemas.user import UserModel


def make_request(path, authorization=None):
    """Minimal HTTPConnection stand-in for the backend."""
    request = MagicMock()
    request.url.path = path
    request.headers = {"authorization": authorization} if authorization else {}
    return request


class TestAuthBackend:
    @pytest.mark.asyncio
    async def test_excluded_path_is_skipped(self, mock_keycloak_manager):
        with patch(
            "book_catalog.auth.get_keycloak_manager",
            return_value=mock_keycloak_manager,
        ):
            result = await AuthBackend().authenticate(
                make_request("/login", "Bearer token")
            )

        assert result is None
        mock_keycloak_manager.decode_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_header(self):
        result = await AuthBackend().authenticate(make_request("/api/books"))

        assert result is None

    @pytest.mark.asyncio
    async def test_non_bearer_scheme(self):
        result = await AuthBackend().authenticate(
            make_request("/api/books", "Basic dXNlcjpwYXNz")
        )

        assert result is None

    @pytest.mark.asyncio
    async def test_valid_token(self, mock_keycloak_manager, mock_user_data):
        with patch(
            "book_catalog.auth.get_keycloak_manager",
            return_value=mock_keycloak_manager,
        ):
            credentials, user = await AuthBackend().authenticate(
                make_request("/api/books", "Bearer valid.token")
            )

        assert isinstance(credentials, AuthCredentials)
        assert credentials.scopes == ["authenticated", "admin"]
        assert isinstance(user, UserModel)
        assert user.id == mock_user_data["sub"]
        mock_keycloak_manager.decode_token.assert_called_once_with(
            "valid.token"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error, reason",
        [
            (JWTExpired("expired"), "token_expired"),
            (KeycloakAuthenticationError("nope"), "invalid_credentials"),
            (ValueError("garbage"), "token_decode_error"),
        ],
    )
    async def test_rejected_token(self, mock_keycloak_manager, error, reason):
        mock_keycloak_manager.decode_token.side_effect = error

        with patch(
            "book_catalog.auth.get_keycloak_manager",
            return_value=mock_keycloak_manager,
        ):
            with pytest.raises(TokenAuthenticationError) as exc_info:
                await AuthBackend().authenticate(
                    make_request("/api/books", "Bearer bad.token")
                )

        assert exc_info.value.reason == reason


class TestUserModel:
    def test_claims(self, mock_user_data):
        user = UserModel(**mock_user_data)

        assert user.username == "admin@example.com"
        assert user.name == "Admin Katalog"
        assert user.roles == ["admin"]
        assert user.expired_in == 9999999999

    def test_serialized_user_validates_again(self, mock_user_data):
        user = UserModel(**mock_user_data)

        again = UserModel.model_validate(user.model_dump())

        assert again == user


class TestLogin:
    @pytest.mark.asyncio
    async def test_login(self, client, mock_keycloak_manager):
        response = await client.post(
            "/login",
            json={"email": "admin@example.com", "password": "password"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token"] == "mock_access_token_12345"
        assert body["refresh_token"] == "mock_refresh_token_67890"
        assert body["user"]["email"] == "admin@example.com"
        mock_keycloak_manager.login_async.assert_called_once_with(
            "admin@example.com", "password"
        )

    @pytest.mark.asyncio
    async def test_invalid_credentials(self, client, mock_keycloak_manager):
        mock_keycloak_manager.login_async.side_effect = (
            KeycloakAuthenticationError("invalid_grant", response_code=401)
        )

        response = await client.post(
            "/login",
            json={"email": "admin@example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_keycloak_unreachable(self, client, mock_keycloak_manager):
        mock_keycloak_manager.login_async.side_effect = (
            KeycloakConnectionError("connection refused")
        )

        response = await client.post(
            "/login",
            json={"email": "admin@example.com", "password": "password"},
        )

        assert response.status_code == 502

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error", [ValueError("Invalid JWS"), JWTExpired("expired")]
    )
    async def test_undecodable_token(
        self, client, mock_keycloak_manager, error
    ):
        mock_keycloak_manager.decode_token.side_effect = error

        response = await client.post(
            "/login",
            json={"email": "admin@example.com", "password": "password"},
        )

        assert response.status_code == 502
        assert response.json() == {
            "message": "Authentication service unavailable"
        }

    @pytest.mark.asyncio
    async def test_missing_fields(self, client, mock_keycloak_manager):
        response = await client.post("/login", json={"email": "not-an-email"})

        assert response.status_code == 422
        assert response.json()["errors"] == {
            "email": ["The email field must be a valid email address."],
            "password": ["The password field is required."],
        }
        mock_keycloak_manager.login_async.assert_not_called()


class TestRegister:
    @pytest.fixture
    def registration(self):
        return {
            "name": "Pembaca Baru",
            "email": "pembaca@example.com",
            "password": "rahasia123",
            "password_confirmation": "rahasia123",
        }

    @pytest.mark.asyncio
    async def test_register_logs_in(
        self, client, mock_keycloak_manager, registration
    ):
        response = await client.post("/register", json=registration)

        assert response.status_code == 201
        assert response.json()["token"] == "mock_access_token_12345"
        mock_keycloak_manager.register_async.assert_called_once_with(
            "Pembaca Baru", "pembaca@example.com", "rahasia123"
        )
        mock_keycloak_manager.login_async.assert_called_once_with(
            "pembaca@example.com", "rahasia123"
        )

    @pytest.mark.asyncio
    async def test_email_taken(
        self, client, mock_keycloak_manager, registration
    ):
        mock_keycloak_manager.register_async.side_effect = KeycloakPostError(
            "User exists with same username", response_code=409
        )

        response = await client.post("/register", json=registration)

        assert response.status_code == 422
        assert response.json()["errors"] == {
            "email": ["The email has already been taken."]
        }

    @pytest.mark.asyncio
    async def test_password_rules(
        self, client, mock_keycloak_manager, registration
    ):
        registration["password"] = "short"

        response = await client.post("/register", json=registration)

        assert response.status_code == 422
        assert response.json()["errors"]["password"] == [
            "The password field must be at least 8 characters."
        ]
        mock_keycloak_manager.register_async.assert_not_called()

    @pytest.mark.asyncio
    async def test_confirmation_mismatch(self, client, registration):
        registration["password_confirmation"] = "rahasia124"

        response = await client.post("/register", json=registration)

        assert response.json()["errors"]["password"] == [
            "The password field confirmation does not match."
        ]


class TestLogoutAndUser:
    @pytest.mark.asyncio
    async def test_current_user(self, client, auth_headers):
        response = await client.get("/user", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["roles"] == ["admin"]
        assert response.json()["name"] == "Admin Katalog"

    @pytest.mark.asyncio
    async def test_current_user_requires_token(self, client):
        response = await client.get("/user")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout(self, client, auth_headers, mock_keycloak_manager):
        response = await client.post(
            "/logout",
            json={"refresh_token": "mock_refresh_token_67890"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out"}
        mock_keycloak_manager.logout_async.assert_called_once_with(
            "mock_refresh_token_67890"
        )

    @pytest.mark.asyncio
    async def test_logout_with_revoked_token(
        self, client, auth_headers, mock_keycloak_manager
    ):
        mock_keycloak_manager.logout_async.side_effect = KeycloakPostError(
            "invalid_grant", response_code=400
        )

        response = await client.post(
            "/logout", json={"refresh_token": "stale"}, headers=auth_headers
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid refresh token"}

    @pytest.mark.asyncio
    async def test_logout_requires_refresh_token(self, client, auth_headers):
        response = await client.post("/logout", json={}, headers=auth_headers)

        assert response.status_code == 422
        assert "refresh_token" in response.json()["errors"]


class TestLogoutCommand:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"refresh_token": "  "}])
    async def test_refresh_token_required(
        self, mock_keycloak_manager, payload
    ):
        with pytest.raises(ValidationError) as exc_info:
            await LogoutCommand(mock_keycloak_manager).execute(payload)

        [error] = exc_info.value.errors
        assert error.field == "refresh_token"
        assert error.rule == "required"
        mock_keycloak_manager.logout_async.assert_not_called()

    @pytest.mark.asyncio
    async def test_ends_session(self, mock_keycloak_manager):
        await LogoutCommand(mock_keycloak_manager).execute(
            {"refresh_token": " mock_refresh_token_67890 "}
        )

        mock_keycloak_manager.logout_async.assert_awaited_once_with(
            "mock_refresh_token_67890"
        )


class TestKeycloakManager:
    @pytest.fixture
    def manager(self):
        from book_catalog.managers.keycloak_manager import KeycloakManager

        with patch(
            "book_catalog.managers.keycloak_manager.KeycloakOpenID"
        ) as openid_cls:
            openid_cls.return_value.a_token = AsyncMock(return_value={})
            openid_cls.return_value.a_logout = AsyncMock()
            yield KeycloakManager()

    def test_server_url_has_single_trailing_slash(self, manager):
        from book_catalog.managers import keycloak_manager

        _, kwargs = keycloak_manager.KeycloakOpenID.call_args
        assert kwargs["server_url"] == "http://localhost:8080/"

    @pytest.mark.asyncio
    async def test_login_uses_password_grant(self, manager):
        await manager.login_async("user@example.com", "secret")

        manager.openid.a_token.assert_called_once_with(
            username="user@example.com", password="secret"
        )

    @pytest.mark.asyncio
    async def test_register_creates_enabled_user(self, manager):
        admin = MagicMock()
        admin.a_create_user = AsyncMock(return_value="user-id")
        manager._admin = admin

        user_id = await manager.register_async(
            "Pembaca", "pembaca@example.com", "rahasia123"
        )

        assert user_id == "user-id"
        payload = admin.a_create_user.call_args.args[0]
        assert payload["username"] == "pembaca@example.com"
        assert payload["enabled"] is True
        assert payload["credentials"][0]["value"] == "rahasia123"
        assert admin.a_create_user.call_args.kwargs == {"exist_ok": False}
