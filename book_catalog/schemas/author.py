"""
Response models for authors.

Views are built explicitly from a loaded ``Author``; the count of books is
passed in by the caller instead of being read from a relationship.
"""

from datetime import date
from typing import Any

from pydantic import field_serializer

from book_catalog.constants import DATE_FORMAT
from book_catalog.models.author import Author
from book_catalog.schemas.base import TimestampedView


class AuthorView(TimestampedView):
    id: int
    name: str
    birth_date: date | None = None
    nationality: str | None = None
    biography: str | None = None

    @field_serializer("birth_date")
    def serialize_birth_date(self, value: date | None) -> str | None:
        return value.strftime(DATE_FORMAT) if value else None

    @classmethod
    def from_model(cls, author: Author, **extra: Any) -> "AuthorView":
        return cls(
            id=author.id,
            name=author.name,
            birth_date=author.birth_date,
            nationality=author.nationality,
            biography=author.biography,
            created_at=author.created_at,
            updated_at=author.updated_at,
            **extra,
        )


class AuthorDetailView(AuthorView):
    """Single-author representation, including the number of books."""

    books_count: int = 0

    @classmethod
    def from_model(  # type: ignore[override]
        cls, author: Author, books_count: int = 0
    ) -> "AuthorDetailView":
        return super().from_model(author, books_count=books_count)
