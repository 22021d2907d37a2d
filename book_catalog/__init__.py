# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from starlette.middleware.authentication import AuthenticationMiddleware

from book_catalog.auth import AuthBackend, on_auth_error
from book_catalog.logging import logger
from book_catalog.middlewares.correlation_id import CorrelationIDMiddleware
from book_catalog.middlewares.logging_context import LoggingContextMiddleware
from book_catalog.routing import collect_subrouters
from book_catalog.storage.db import engine, wait_and_init_db
from book_catalog.utils.error_handler import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application startup and shutdown.

    The schema is managed by Alembic, so startup only waits until the
    database accepts connections.
    """
    await wait_and_init_db()
    logger.info("Application startup complete")

    yield

    logger.info("Application shutdown initiated")
    await engine.dispose()
    logger.info("Application shutdown complete")


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    Registers the routers collected by ``collect_subrouters()``, the
    exception handlers rendering ``{"message", "errors"}`` bodies, and the
    middlewares:
    - `CorrelationIDMiddleware`: request correlation IDs.
    - `LoggingContextMiddleware`: endpoint and method in every log record.
    - `AuthenticationMiddleware`: Keycloak bearer tokens via `AuthBackend`.
    """
    # Initialize application
    app = FastAPI(
        title="Book Catalog API",
        description="Authors, books and publishers administration API",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Collect routers
    app.include_router(collect_subrouters())

    register_exception_handlers(app)

    # Middlewares (execute in REVERSE order of registration)
    # Execution flow: CorrelationIDMiddleware → LoggingContextMiddleware → AuthenticationMiddleware
    app.add_middleware(
        AuthenticationMiddleware, backend=AuthBackend(), on_error=on_auth_error
    )
    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    return app


app = application()  # Need for fastapi cli
