"""
Notes API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the API contract of the notes endpoints.
How:   FastAPI validates request bodies against the request models and
       serializes stored documents through NoteResponse.

Schemas are separate from the SQLAlchemy model so the API representation
only ever carries the logical `id`, never storage-internal fields such as
`revision`.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes.

    `content` is optional at this level so a missing value can be answered
    with the dedicated "content missing" error instead of a generic one.
    Any `date` sent by the client is ignored.
    """
    content: Optional[str] = Field(default=None, description="Note text (min 5 characters)")
    important: Optional[bool] = Field(default=None, description="Importance flag, defaults to false")


class NoteUpdate(BaseModel):
    """Body of PUT /api/notes/{id}. Only present, non-null fields are applied."""
    content: Optional[str] = Field(default=None, description="Replacement note text")
    important: Optional[bool] = Field(default=None, description="Replacement importance flag")

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    API representation of a note.

    Example:
        {
            "id": "65a1f0c2e4b0a1b2c3d4e5f6",
            "content": "HTML is easy",
            "important": true,
            "date": "2024-01-15T12:00:00Z"
        }
    """
    id: str = Field(description="Object id assigned by the store")
    content: str = Field(description="Note text")
    important: bool = Field(default=False, description="Importance flag")
    date: datetime = Field(description="Creation timestamp (UTC ISO 8601)")

    model_config = {"from_attributes": True}

    @field_validator("important", mode="before")
    @classmethod
    def null_important_is_false(cls, v):
        return False if v is None else v

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class ErrorResponse(BaseModel):
    """
    Error body shared by every normalized failure.

    Example:
        {"error": "malformatted id"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Health check response showing service and store status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
