import asyncio
from typing import Any, AsyncIterator

from sqlalchemy import event
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from book_catalog.logging import logger
from book_catalog.settings import app_settings


def engine_options(database_url: str) -> dict[str, Any]:
    """
    Build ``create_async_engine`` keyword arguments for a database URL.

    SQLite engines use a single-connection pool that rejects pool sizing
    options, so those are only passed to server databases.

    Args:
        database_url: SQLAlchemy connection URL.

    Returns:
        Keyword arguments for ``create_async_engine``.
    """
    if database_url.startswith("sqlite"):
        return {"echo": False}

    return {
        "echo": False,
        "pool_size": app_settings.DB_POOL_SIZE,
        "max_overflow": app_settings.DB_MAX_OVERFLOW,
        "pool_recycle": app_settings.DB_POOL_RECYCLE,
        "pool_pre_ping": app_settings.DB_POOL_PRE_PING,
    }


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    """
    Create an async engine for a database URL.

    SQLite connections get foreign key enforcement switched on, which
    SQLite leaves off by default.

    Args:
        database_url: SQLAlchemy connection URL.
        **kwargs: Extra ``create_async_engine`` arguments.
    """
    db_engine = create_async_engine(
        database_url, **{**engine_options(database_url), **kwargs}
    )
    if database_url.startswith("sqlite"):
        event.listen(
            db_engine.sync_engine, "connect", _enable_sqlite_foreign_keys
        )
    return db_engine


engine: AsyncEngine = make_engine(app_settings.DATABASE_URL)
async_session = sessionmaker(
    engine, expire_on_commit=False, class_=AsyncSession
)


async def wait_and_init_db(
    retry_interval: int | None = None,
    max_retries: int | None = None,
) -> None:
    """
    Block application startup until the catalog database answers.

    The schema itself comes from ``alembic upgrade head``; this only checks
    connectivity, e.g. while the database container is still starting.

    Args:
        retry_interval: Seconds between attempts
            (``DB_INIT_RETRY_INTERVAL`` by default).
        max_retries: Number of attempts (``DB_INIT_MAX_RETRIES`` by default).

    Raises:
        RuntimeError: If no attempt succeeded.
    """
    interval = retry_interval or app_settings.DB_INIT_RETRY_INTERVAL
    attempts = max_retries or app_settings.DB_INIT_MAX_RETRIES

    for attempt in range(1, attempts + 1):
        try:
            async with engine.connect() as conn:
                await conn.exec_driver_sql("SELECT 1")
        except OperationalError as ex:
            logger.warning(
                f"Catalog database unavailable ({attempt}/{attempts}), "
                f"next try in {interval}s: {ex}"
            )
            await asyncio.sleep(interval)
            continue

        logger.info("Catalog database is reachable")
        return

    logger.error(f"Catalog database unreachable after {attempts} attempts")
    raise RuntimeError("Database connection could not be established.")


async def create_db_and_tables(db_engine: AsyncEngine | None = None) -> None:
    """
    Create all tables directly from the SQLModel metadata.

    Used for SQLite development databases and tests; server databases are
    migrated with Alembic.

    Args:
        db_engine: Engine to create the tables on. Defaults to the
            application engine.
    """
    # Register all table models on SQLModel.metadata
    from book_catalog.models import author, book, publisher  # noqa: F401

    async with (db_engine or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncIterator[AsyncSession]:
    """
    Session for one request.

    Repositories only flush; the request's writes become visible when the
    handler returns and the transaction is committed here. Any error rolls
    everything back.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as ex:
            await session.rollback()
            logger.error(f"Request transaction rolled back: {ex}")
            raise
