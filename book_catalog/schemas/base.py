from datetime import datetime

from pydantic import BaseModel, field_serializer

from book_catalog.constants import DATETIME_FORMAT


class TimestampedView(BaseModel):  # type: ignore[misc]
    """Response model base for records with creation/modification time."""

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime | None) -> str | None:
        return value.strftime(DATETIME_FORMAT) if value else None


class RelatedSummary(BaseModel):  # type: ignore[misc]
    """Minimal representation of a related record (``{id, name}``)."""

    id: int
    name: str
