"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for authentication, the database and
the HTTP client. Every test using the database gets its own in-memory
SQLite database; Keycloak is replaced by a mock.
"""

import os
from unittest.mock import AsyncMock, Mock, patch

import pytest

# Set required environment variables for testing before importing app modules
os.environ.setdefault("KEYCLOAK_REALM", "test-realm")
os.environ.setdefault("KEYCLOAK_CLIENT_ID", "test-client")
os.environ.setdefault("KEYCLOAK_BASE_URL", "http://localhost:8080/")
os.environ.setdefault("KEYCLOAK_ADMIN_USERNAME", "admin")
os.environ.setdefault("KEYCLOAK_ADMIN_PASSWORD", "admin")

# In-memory database instead of PostgreSQL
os.environ.setdefault("DB_URL", "sqlite+aiosqlite://")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

ACCESS_TOKEN = "mock_access_token_12345"


@pytest.fixture
def mock_keycloak_token():
    """
    Provides a mock Keycloak token response.

    Returns:
        dict: Mock token response with access_token, refresh_token, etc.
    """
    return {
        "access_token": ACCESS_TOKEN,
        "expires_in": 300,
        "refresh_expires_in": 1800,
        "refresh_token": "mock_refresh_token_67890",
        "token_type": "Bearer",
        "not-before-policy": 0,
        "session_state": "mock-session-state",
        "scope": "openid email profile",
    }


@pytest.fixture
def mock_user_data():
    """
    Provides mock decoded user data from Keycloak token.

    Returns:
        dict: Mock user data with roles and claims
    """
    return {
        "sub": "f86caf01-69b4-4892-ba2d-ffa58fdd5dab",
        "preferred_username": "admin@example.com",
        "name": "Admin Katalog",
        "email": "admin@example.com",
        "exp": 9999999999,
        "azp": "test-client",
        "resource_access": {"test-client": {"roles": ["admin"]}},
    }


@pytest.fixture
def mock_user(mock_user_data):
    from book_catalog.schemas.user import UserModel

    return UserModel(**mock_user_data)


@pytest.fixture
def mock_keycloak_manager(mock_keycloak_token, mock_user_data):
    """
    KeycloakManager stand-in accepting ``ACCESS_TOKEN``.

    Returns:
        Mock: Manager whose async methods are AsyncMocks.
    """
    manager = Mock()
    manager.login_async = AsyncMock(return_value=mock_keycloak_token)
    manager.decode_token = AsyncMock(return_value=mock_user_data)
    manager.logout_async = AsyncMock(return_value=None)
    manager.register_async = AsyncMock(return_value="new-user-id")
    return manager


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {ACCESS_TOKEN}"}


@pytest.fixture
async def db_engine():
    """Fresh in-memory database with all tables created."""
    from book_catalog.storage.db import create_db_and_tables, make_engine

    engine = make_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await create_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory, mock_keycloak_manager):
    """
    HTTP client for the full application.

    Requests run against the test database, one session per request, and
    authenticate through the mocked Keycloak manager.
    """
    from book_catalog import app
    from book_catalog.dependencies import get_keycloak_manager
    from book_catalog.storage.db import get_session

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_keycloak_manager] = (
        lambda: mock_keycloak_manager
    )

    with patch(
        "book_catalog.auth.get_keycloak_manager",
        return_value=mock_keycloak_manager,
    ):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as http_client:
            yield http_client

    app.dependency_overrides.clear()


@pytest.fixture
async def seeded(session_factory):
    """
    Small catalog: three authors, two publishers and four books.

    Returns:
        dict: IDs of the created records by name/title.
    """
    from datetime import date

    from book_catalog.models.author import Author
    from book_catalog.models.book import Book
    from book_catalog.models.publisher import Publisher
    from book_catalog.repositories.author_repository import AuthorRepository
    from book_catalog.repositories.book_repository import BookRepository
    from book_catalog.repositories.publisher_repository import (
        PublisherRepository,
    )

    ids = {}
    async with session_factory() as session:
        authors = AuthorRepository(session)
        publishers = PublisherRepository(session)
        books = BookRepository(session)

        for name, born in (
            ("Ann", date(1970, 5, 1)),
            ("Bob", date(1960, 1, 2)),
            ("Cid", None),
        ):
            author = await authors.create(Author(name=name, birth_date=born))
            ids[name] = author.id

        for name, city in (("Bentang", "Yogyakarta"), ("Gramedia", "Jakarta")):
            publisher = await publishers.create(
                Publisher(name=name, city=city, established_year=1970)
            )
            ids[name] = publisher.id

        for title, author, publisher, isbn in (
            ("Laskar Pelangi", "Ann", "Bentang", "9789793062792"),
            ("Sang Pemimpi", "Ann", "Bentang", None),
            ("Bumi Manusia", "Bob", "Gramedia", "9789799731234"),
            ("Perahu Kertas", "Cid", "Gramedia", None),
        ):
            book = await books.create(
                Book(
                    title=title,
                    isbn=isbn,
                    author_id=ids[author],
                    publisher_id=ids[publisher],
                )
            )
            ids[title] = book.id

        await session.commit()

    return ids
