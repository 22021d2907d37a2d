"""
Management CLI for the book catalog.

Example:
    catalog-cli seed --create-tables
    catalog-cli routes
"""

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from book_catalog import app
from book_catalog.settings import app_settings
from book_catalog.storage.db import async_session, create_db_and_tables, engine
from book_catalog.storage.seed import SeedReport, seed_catalog

# Initialize Typer app with help text
typer_app = typer.Typer(
    name="catalog-cli",
    help="Book Catalog Management CLI - Seed data and inspect the API",
    add_completion=False,
)
console = Console()


async def _seed(create_tables: bool, seed: int, books: int) -> SeedReport:
    try:
        if create_tables:
            await create_db_and_tables()

        async with async_session() as session:
            report = await seed_catalog(session, seed=seed, book_count=books)
            await session.commit()
    finally:
        await engine.dispose()

    return report


@typer_app.command(name="seed")
def seed(
    create_tables: bool = typer.Option(
        False,
        "--create-tables",
        help="Create missing tables first (SQLite development databases)",
    ),
    seed: int = typer.Option(2025, help="Random seed of the sample data"),
    books: int = typer.Option(100, min=0, help="Number of generated books"),
):
    """
    Fill the database with sample authors, publishers and books.

    Records that already exist are skipped, so the command can be re-run.

    Example:
        catalog-cli seed
        DB_URL=sqlite+aiosqlite:///catalog.db catalog-cli seed --create-tables
    """
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Seeding book catalog[/bold cyan]",
            border_style="cyan",
        )
    )

    report = asyncio.run(_seed(create_tables, seed, books))

    table = Table("Entity", "Created", title="Seed Summary")
    table.add_row("Authors", str(report.authors))
    table.add_row("Publishers", str(report.publishers))
    table.add_row("Books", str(report.books))
    console.print(table)
    console.print()


@typer_app.command(name="routes")
def routes():
    """
    Display a table of all HTTP routes and whether they need a token.

    Routes are read from the OpenAPI schema, which lists every operation
    of the included routers.

    Example:
        catalog-cli routes
    """
    table = Table(
        "Methods",
        "Path",
        "Summary",
        "Auth",
        title="Registered Routes",
        show_lines=True,
    )

    for path, operations in app.openapi()["paths"].items():
        public = app_settings.EXCLUDED_PATHS.match(path) is not None
        summary = " / ".join(
            sorted({op.get("summary", "") for op in operations.values()})
        )
        table.add_row(
            ", ".join(sorted(method.upper() for method in operations)),
            f"[green]{path}[/green]",
            f"[yellow]{summary}[/yellow]",
            "[dim]public[/dim]" if public else "bearer",
        )

    console.print(table)


def main():
    typer_app()


if __name__ == "__main__":
    main()
