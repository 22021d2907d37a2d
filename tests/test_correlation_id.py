"""Tests for the correlation ID and logging context middlewares."""

import json
import logging

import pytest

from book_catalog.logging import (
    StructuredJSONFormatter,
    clear_log_context,
    get_log_context,
    set_log_context,
)


class TestCorrelationIDMiddleware:
    @pytest.mark.asyncio
    async def test_generated_when_missing(self, client):
        response = await client.get("/api/authors")

        assert len(response.headers["X-Correlation-ID"]) == 8

    @pytest.mark.asyncio
    async def test_incoming_id_is_echoed_and_truncated(self, client):
        response = await client.get(
            "/api/authors", headers={"X-Correlation-ID": "abcdef1234567890"}
        )

        assert response.headers["X-Correlation-ID"] == "abcdef12"


class TestLogContext:
    def test_set_and_clear(self):
        clear_log_context()
        set_log_context(endpoint="/api/books", method="GET")

        assert get_log_context() == {"endpoint": "/api/books", "method": "GET"}

        clear_log_context()
        assert get_log_context() == {}

    def test_json_formatter_includes_context(self):
        set_log_context(user_id="user-1")
        record = logging.LogRecord(
            "book_catalog", logging.INFO, __file__, 1, "Created", None, None
        )

        try:
            line = json.loads(StructuredJSONFormatter().format(record))
        finally:
            clear_log_context()

        assert line["message"] == "Created"
        assert line["level"] == "INFO"
        assert line["user_id"] == "user-1"
