"""
Exception handlers turning errors into the API's JSON error bodies.

Business code raises ``AppException`` subclasses and never builds error
responses itself; the handlers registered here render them:

    404 {"message": "Author not found"}
    422 {"message": "...", "errors": {"name": ["The name field is required."]}}
    500 {"message": "Database error occurred"}
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from book_catalog.exceptions import AppException, ValidationError
from book_catalog.logging import logger
from book_catalog.schemas.errors import (
    MessageResponse,
    ValidationErrorResponse,
    group_field_errors,
    summarize_field_errors,
)
from book_catalog.validation.rules import field_errors


def error_response(ex: AppException) -> JSONResponse:
    """Render an application exception with its HTTP status."""
    if isinstance(ex, ValidationError):
        body = ValidationErrorResponse(
            message=ex.message, errors=group_field_errors(ex.errors)
        )
    else:
        body = MessageResponse(message=ex.message)

    return JSONResponse(status_code=ex.http_status, content=body.model_dump())


async def app_exception_handler(
    request: Request, ex: AppException
) -> JSONResponse:
    logger.warning(
        f"AppException in {request.method} {request.url.path}: {ex.message}",
        extra={"exception_type": type(ex).__name__},
    )
    return error_response(ex)


async def database_exception_handler(
    request: Request, ex: SQLAlchemyError
) -> JSONResponse:
    logger.error(
        f"Database error in {request.method} {request.url.path}: {ex}",
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=MessageResponse(message="Database error occurred").model_dump(),
    )


async def request_validation_handler(
    request: Request, ex: RequestValidationError
) -> JSONResponse:
    """
    Render FastAPI's own request validation failures (malformed JSON, bad
    path parameters) in the same shape as the catalog's field errors.
    """
    # Drop the "body"/"path"/"query" prefix of each location
    errors = field_errors(ex.errors(), skip=1)

    body = ValidationErrorResponse(
        message=summarize_field_errors(errors),
        errors=group_field_errors(errors),
    )
    return JSONResponse(
        status_code=ValidationError.http_status,
        content=body.model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(
        RequestValidationError, request_validation_handler
    )
