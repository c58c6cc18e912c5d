"""
Notes API — Note SQLAlchemy Model
==================================

What:  ORM model representing one stored note document (`notes` table).
Who:   Used by the note service for every store operation.

Document fields:
    - id:        24-char hex object id, assigned at insert, never reassigned
    - content:   note text; validated by the store before each write
    - important: importance flag; nullable at the storage level
    - date:      creation timestamp (UTC), set server-side, never updated
    - revision:  storage-internal write counter, hidden from the API
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base
from notes_api.services.object_id import OBJECT_ID_LENGTH, new_object_id


class Note(Base):
    """
    A note document.

    Lifecycle:
        1. Inserted by create (id and date assigned server-side)
        2. content/important replaced by update; revision incremented
        3. Removed by delete; there is no soft delete
    """

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        primary_key=True,
        default=new_object_id,
        comment="Object id (24 hex characters)",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note text, at least 5 characters",
    )

    important: Mapped[bool | None] = mapped_column(
        Boolean,
        nullable=True,
        default=False,
    )

    # Stored in UTC; SQLite drops the offset, readers treat naive values as UTC
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When the note was created (UTC)",
    )

    revision: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Storage-internal write counter; never exposed by the API",
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, important={self.important}, "
            f"date='{self.date}')>"
        )
