"""
Custom exception classes for the application.

Each exception carries the HTTP status it is rendered with, so business
code can raise them without knowing about FastAPI. The exception handlers in
``book_catalog.utils.error_handler`` turn them into JSON responses.
"""

from book_catalog.schemas.errors import FieldError, summarize_field_errors


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        http_status: HTTP status code for REST API responses.
    """

    http_status: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(AppException):
    """
    Input data failed one or more validation rules.

    All violations found in a request are collected into ``errors`` and
    reported together; nothing is written when this is raised.

    HTTP Status: 422 Unprocessable Entity
    """

    http_status = 422

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        super().__init__(summarize_field_errors(self.errors))


class NotFoundError(AppException):
    """
    Resource not found.

    HTTP Status: 404 Not Found
    """

    http_status = 404


class AuthenticationError(AppException):
    """
    Authentication failed (missing, invalid or expired token, bad credentials).

    HTTP Status: 401 Unauthorized
    """

    http_status = 401

    def __init__(self, message: str = "Unauthenticated."):
        super().__init__(message)


class IdentityProviderError(AppException):
    """
    The identity provider (Keycloak) failed or could not be reached.

    HTTP Status: 502 Bad Gateway
    """

    http_status = 502
