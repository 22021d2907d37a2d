"""Tests for the exception handlers and the JSON error bodies."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from book_catalog.exceptions import (
    AuthenticationError,
    IdentityProviderError,
    NotFoundError,
    ValidationError,
)
from book_catalog.schemas.errors import FieldError, summarize_field_errors
from book_catalog.utils.error_handler import (
    error_response,
    register_exception_handlers,
)


@pytest.fixture
async def error_client():
    """Client for a bare app whose routes raise each kind of error."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/not-found")
    async def not_found():
        raise NotFoundError("Author not found")

    @app.get("/invalid")
    async def invalid():
        raise ValidationError(
            [
                FieldError(field="name", rule="required", message="A."),
                FieldError(field="name", rule="max", message="B."),
                FieldError(field="pages", rule="min", message="C."),
            ]
        )

    @app.get("/database")
    async def database():
        raise OperationalError("SELECT 1", {}, Exception("boom"))

    @app.get("/items/{item_id}")
    async def item(item_id: int):
        return {"id": item_id}

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


class TestErrorResponse:
    def test_plain_message(self):
        response = error_response(NotFoundError("Book not found"))

        assert response.status_code == 404
        assert response.body == b'{"message":"Book not found"}'

    @pytest.mark.parametrize(
        "exc, status",
        [
            (AuthenticationError(), 401),
            (IdentityProviderError("down"), 502),
            (ValidationError([]), 422),
        ],
    )
    def test_status_codes(self, exc, status):
        assert error_response(exc).status_code == status


class TestSummarizeFieldErrors:
    def test_no_errors(self):
        assert summarize_field_errors([]) == "The given data was invalid."

    def test_one_more_error(self):
        errors = [
            FieldError(field="a", rule="x", message="First."),
            FieldError(field="b", rule="x", message="Second."),
        ]

        assert summarize_field_errors(errors) == "First. (and 1 more error)"


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_not_found(self, error_client):
        response = await error_client.get("/not-found")

        assert response.status_code == 404
        assert response.json() == {"message": "Author not found"}

    @pytest.mark.asyncio
    async def test_validation_errors_grouped_by_field(self, error_client):
        response = await error_client.get("/invalid")

        assert response.status_code == 422
        assert response.json() == {
            "message": "A. (and 2 more errors)",
            "errors": {"name": ["A.", "B."], "pages": ["C."]},
        }

    @pytest.mark.asyncio
    async def test_database_error_hides_details(self, error_client):
        response = await error_client.get("/database")

        assert response.status_code == 500
        assert response.json() == {"message": "Database error occurred"}

    @pytest.mark.asyncio
    async def test_request_validation_error_shape(self, error_client):
        response = await error_client.get("/items/abc")

        body = response.json()
        assert response.status_code == 422
        assert list(body["errors"]) == ["item_id"]
        assert body["message"] == body["errors"]["item_id"][0]
        assert body["message"] == "The item id field must be an integer."
