"""Tests for the sample catalog seeding."""

import random

import pytest
from typer.testing import CliRunner

from book_catalog.repositories.book_repository import BookRepository
from book_catalog.storage.seed import SeedReport, isbn13, seed_catalog


class TestIsbn13:
    def test_check_digit_is_valid(self):
        rng = random.Random(7)

        for _ in range(20):
            isbn = isbn13(rng)
            weights = [1 if i % 2 == 0 else 3 for i in range(13)]
            assert len(isbn) == 13
            assert isbn.startswith("978")
            assert sum(int(d) * w for d, w in zip(isbn, weights)) % 10 == 0


class TestSeedCatalog:
    @pytest.mark.asyncio
    async def test_seed_counts(self, session):
        report = await seed_catalog(session, book_count=10)
        await session.commit()

        assert report == SeedReport(authors=20, publishers=20, books=13)

    @pytest.mark.asyncio
    async def test_seed_is_repeatable(self, session):
        await seed_catalog(session, book_count=10)
        await session.commit()

        report = await seed_catalog(session, book_count=10)
        await session.commit()

        assert report == SeedReport()
        assert len(await BookRepository(session).get_all()) == 13

    @pytest.mark.asyncio
    async def test_seeded_books_reference_seeded_rows(self, session):
        await seed_catalog(session, book_count=5)
        await session.commit()

        repo = BookRepository(session)
        for book in await repo.get_all():
            assert await repo.author_exists(book.author_id)
            assert await repo.publisher_exists(book.publisher_id)


class TestCli:
    def test_routes(self):
        from book_catalog.cli import typer_app

        result = CliRunner().invoke(typer_app, ["routes"])

        assert result.exit_code == 0
        assert "Registered Routes" in result.output
        assert "bearer" in result.output
        assert "public" in result.output
        assert "/login" in result.output

    def test_seed_prints_summary(self, monkeypatch):
        from book_catalog import cli

        async def fake_seed(create_tables, seed, books):
            assert (create_tables, seed, books) == (True, 2025, 5)
            return SeedReport(authors=1, publishers=2, books=5)

        monkeypatch.setattr(cli, "_seed", fake_seed)

        result = CliRunner().invoke(
            cli.typer_app, ["seed", "--create-tables", "--books", "5"]
        )

        assert result.exit_code == 0
        assert "Seed Summary" in result.output
