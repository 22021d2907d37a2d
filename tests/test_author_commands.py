"""
Tests for Author commands.

These tests verify that commands correctly encapsulate business logic
and can be tested independently of HTTP handlers.
"""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from book_catalog.commands.author_commands import (
    CreateAuthorCommand,
    DeleteAuthorCommand,
    GetAuthorCommand,
    ListAuthorsCommand,
    UpdateAuthorCommand,
)
from book_catalog.commands.base import UpdateInput
from book_catalog.exceptions import NotFoundError, ValidationError
from book_catalog.models.author import Author
from book_catalog.schemas.listing import ListQuery
from book_catalog.schemas.response import build_metadata

STAMP = datetime(2025, 1, 2, 3, 4, 5)


def make_author(**kwargs):
    kwargs.setdefault("created_at", STAMP)
    kwargs.setdefault("updated_at", STAMP)
    return Author(**kwargs)


def integrity_error():
    return IntegrityError("INSERT INTO authors", {}, Exception("UNIQUE"))


class TestListAuthorsCommand:
    @pytest.mark.asyncio
    async def test_returns_views_and_metadata(self):
        mock_repo = AsyncMock()
        meta = build_metadata(page=1, per_page=10, total=2, item_count=2)
        mock_repo.paginate.return_value = (
            [make_author(id=1, name="Ann"), make_author(id=2, name="Bob")],
            meta,
        )
        query = ListQuery(sort="name")

        views, result_meta = await ListAuthorsCommand(mock_repo).execute(query)

        assert [v.name for v in views] == ["Ann", "Bob"]
        assert result_meta is meta
        mock_repo.paginate.assert_called_once_with(query)


class TestGetAuthorCommand:
    @pytest.mark.asyncio
    async def test_includes_books_count(self):
        mock_repo = AsyncMock()
        mock_repo.get_by_id.return_value = make_author(id=1, name="Ann")
        mock_repo.count_books.return_value = 4

        view = await GetAuthorCommand(mock_repo).execute(1)

        assert view.books_count == 4
        assert view.model_dump()["created_at"] == "2025-01-02 03:04:05"

    @pytest.mark.asyncio
    async def test_not_found(self):
        mock_repo = AsyncMock()
        mock_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await GetAuthorCommand(mock_repo).execute(999)

        assert exc_info.value.message == "Author not found"
        assert exc_info.value.http_status == 404


class TestCreateAuthorCommand:
    @pytest.mark.asyncio
    async def test_create_author(self):
        mock_repo = AsyncMock()
        mock_repo.create.return_value = make_author(id=1, name="Dee Lestari")

        view = await CreateAuthorCommand(mock_repo).execute(
            {"name": " Dee Lestari ", "unknown": "ignored"}
        )

        assert view.id == 1
        created = mock_repo.create.call_args.args[0]
        assert created.name == "Dee Lestari"
        mock_repo.is_taken.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_name_detected_by_write(self):
        mock_repo = AsyncMock()
        mock_repo.create.side_effect = integrity_error()
        mock_repo.is_taken.return_value = True

        with pytest.raises(ValidationError) as exc_info:
            await CreateAuthorCommand(mock_repo).execute({"name": "Ann"})

        [error] = exc_info.value.errors
        assert error.field == "name"
        assert error.message == "The name has already been taken."
        mock_repo.is_taken.assert_called_once_with(
            "name", "Ann", exclude_id=None
        )

    @pytest.mark.asyncio
    async def test_unexplained_integrity_error_propagates(self):
        mock_repo = AsyncMock()
        mock_repo.create.side_effect = integrity_error()
        mock_repo.is_taken.return_value = False

        with pytest.raises(IntegrityError):
            await CreateAuthorCommand(mock_repo).execute({"name": "Ann"})

    @pytest.mark.asyncio
    async def test_rule_errors_reported_with_uniqueness(self):
        mock_repo = AsyncMock()
        mock_repo.is_taken.return_value = True

        with pytest.raises(ValidationError) as exc_info:
            await CreateAuthorCommand(mock_repo).execute(
                {"name": "Ann", "birth_date": "yesterday"}
            )

        assert [e.rule for e in exc_info.value.errors] == ["date", "unique"]
        mock_repo.create.assert_not_called()


class TestUpdateAuthorCommand:
    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self):
        author = make_author(id=1, name="Ann", nationality="Indonesia")
        mock_repo = AsyncMock()
        mock_repo.get_by_id.return_value = author
        mock_repo.update.side_effect = lambda entity: entity

        view = await UpdateAuthorCommand(mock_repo).execute(
            UpdateInput(id=1, payload={"biography": "Novelist."})
        )

        assert view.name == "Ann"
        assert view.nationality == "Indonesia"
        assert view.biography == "Novelist."

    @pytest.mark.asyncio
    async def test_name_conflict_excludes_own_row(self):
        mock_repo = AsyncMock()
        mock_repo.get_by_id.return_value = make_author(id=1, name="Ann")
        mock_repo.update.side_effect = integrity_error()
        mock_repo.is_taken.return_value = True

        with pytest.raises(ValidationError):
            await UpdateAuthorCommand(mock_repo).execute(
                UpdateInput(id=1, payload={"name": "Bob"})
            )

        mock_repo.is_taken.assert_called_once_with("name", "Bob", exclude_id=1)

    @pytest.mark.asyncio
    async def test_not_found(self):
        mock_repo = AsyncMock()
        mock_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await UpdateAuthorCommand(mock_repo).execute(
                UpdateInput(id=5, payload={"name": "X"})
            )

        mock_repo.update.assert_not_called()


class TestDeleteAuthorCommand:
    @pytest.mark.asyncio
    async def test_delete_author(self):
        author = make_author(id=1, name="Ann")
        mock_repo = AsyncMock()
        mock_repo.get_by_id.return_value = author

        await DeleteAuthorCommand(mock_repo).execute(1)

        mock_repo.delete.assert_called_once_with(author)

    @pytest.mark.asyncio
    async def test_delete_not_found(self):
        mock_repo = AsyncMock()
        mock_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await DeleteAuthorCommand(mock_repo).execute(999)

        mock_repo.delete.assert_not_called()
