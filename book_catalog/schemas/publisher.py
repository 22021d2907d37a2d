"""Response models for publishers."""

from typing import Any

from book_catalog.models.publisher import Publisher
from book_catalog.schemas.base import TimestampedView


class PublisherView(TimestampedView):
    id: int
    name: str
    city: str | None = None
    established_year: int | None = None

    @classmethod
    def from_model(cls, publisher: Publisher, **extra: Any) -> "PublisherView":
        return cls(
            id=publisher.id,
            name=publisher.name,
            city=publisher.city,
            established_year=publisher.established_year,
            created_at=publisher.created_at,
            updated_at=publisher.updated_at,
            **extra,
        )


class PublisherDetailView(PublisherView):
    """Single-publisher representation, including the number of books."""

    books_count: int = 0

    @classmethod
    def from_model(  # type: ignore[override]
        cls, publisher: Publisher, books_count: int = 0
    ) -> "PublisherDetailView":
        return super().from_model(publisher, books_count=books_count)
