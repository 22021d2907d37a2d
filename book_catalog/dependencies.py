"""
Dependency injection configuration for FastAPI.

This module provides dependency injection setup for managers, repositories,
and database sessions. Each repository receives the request's session, so
all work of one request runs in a single transaction.

Example:
    ```python
    from fastapi import APIRouter
    from book_catalog.dependencies import AuthorRepoDep

    router = APIRouter()

    @router.get("/api/authors/{author_id}")
    async def show_author(author_id: int, repo: AuthorRepoDep):
        return await repo.get_by_id(author_id)
    ```
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Path
from sqlmodel.ext.asyncio.session import AsyncSession

from book_catalog.constants import MAX_RECORD_ID
from book_catalog.managers.keycloak_manager import KeycloakManager
from book_catalog.repositories.author_repository import AuthorRepository
from book_catalog.repositories.book_repository import BookRepository
from book_catalog.repositories.publisher_repository import PublisherRepository
from book_catalog.storage.db import get_session

# ============================================================================
# Database Session Dependencies
# ============================================================================

SessionDep = Annotated[AsyncSession, Depends(get_session)]


# ============================================================================
# Path Parameters
# ============================================================================

# Primary key in a URL; larger values cannot match an INTEGER column
RecordIdPath = Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]


# ============================================================================
# Manager Dependencies
# ============================================================================


@lru_cache
def get_keycloak_manager() -> KeycloakManager:
    """
    Get cached Keycloak manager instance.

    Can be overridden in tests using app.dependency_overrides, or by
    patching this function where it is imported.

    Returns:
        Cached KeycloakManager instance.
    """
    return KeycloakManager()


KeycloakDep = Annotated[KeycloakManager, Depends(get_keycloak_manager)]


# ============================================================================
# Repository Dependencies
# ============================================================================


def get_author_repository(session: SessionDep) -> AuthorRepository:
    return AuthorRepository(session)


def get_book_repository(session: SessionDep) -> BookRepository:
    return BookRepository(session)


def get_publisher_repository(session: SessionDep) -> PublisherRepository:
    return PublisherRepository(session)


AuthorRepoDep = Annotated[AuthorRepository, Depends(get_author_repository)]
BookRepoDep = Annotated[BookRepository, Depends(get_book_repository)]
PublisherRepoDep = Annotated[
    PublisherRepository, Depends(get_publisher_repository)
]
