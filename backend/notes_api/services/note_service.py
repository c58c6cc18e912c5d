"""
Notes API — Note Service (Document Store Client)
=================================================

What:  Every read and write of note documents goes through NoteService.
How:   Async SQLAlchemy queries on the session handed in for the current
       request; ids are parsed and documents validated before the store is
       touched.
Who:   Called by the notes route handlers and the CLI.
When:  Once per store operation; the service itself holds no state.

Outcomes callers must handle:
    ┌────────────────────────────┬──────────────────────────────────────┐
    │ id not 24 hex chars        │ MalformedIdError                     │
    │ document breaks a rule     │ DocumentValidationError              │
    │ well-formed id, no document│ None (find_by_id / update)           │
    │                            │ False (find_by_id_and_remove)        │
    │ backend failure            │ DatabaseError                        │
    └────────────────────────────┴──────────────────────────────────────┘
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.exceptions import DatabaseError, DocumentValidationError
from notes_api.models.note import Note
from notes_api.schemas.note import NoteResponse
from notes_api.services.object_id import parse_object_id

logger = logging.getLogger(__name__)

CONTENT_MIN_LENGTH = 5

CREATE_VALIDATION_PREFIX = "Note validation failed"
UPDATE_VALIDATION_PREFIX = "Validation failed"


def validate_document(
    document: Dict[str, Any],
    paths: Iterable[str] = ("content", "date"),
    prefix: str = CREATE_VALIDATION_PREFIX,
) -> None:
    """
    Apply the note schema rules to the given paths of `document`.

    Rules:
        content: required, at least CONTENT_MIN_LENGTH characters
        date:    required

    Raises:
        DocumentValidationError: listing every failing path
    """
    errors: List[Tuple[str, str]] = []
    for path in paths:
        value = document.get(path)
        if path == "content":
            if value is None or value == "":
                errors.append(("content", "Path `content` is required."))
            elif len(value) < CONTENT_MIN_LENGTH:
                errors.append((
                    "content",
                    f"Path `content` (`{value}`) is shorter than the minimum "
                    f"allowed length ({CONTENT_MIN_LENGTH}).",
                ))
        elif path == "date":
            if value is None:
                errors.append(("date", "Path `date` is required."))
    if errors:
        raise DocumentValidationError(errors=errors, prefix=prefix)


class NoteService:
    """
    Store client for note documents.

    Responsibilities:
        - find_all(): every note, in store order
        - find_by_id(): one note or None
        - create(): validate and insert a new note
        - find_by_id_and_update(): replace content/important on a note
        - find_by_id_and_remove(): delete a note if present

    Error Handling Strategy:
        Our own exceptions propagate unchanged. SQLAlchemy errors are logged
        and wrapped in DatabaseError so no backend detail reaches clients.
    """

    async def find_all(self, db: AsyncSession) -> List[NoteResponse]:
        try:
            result = await db.execute(select(Note))
            notes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes.",
                context={"error_type": type(e).__name__},
            ) from e
        return [NoteResponse.model_validate(note) for note in notes]

    async def find_by_id(self, db: AsyncSession, note_id: str) -> Optional[NoteResponse]:
        """
        Look up a single note.

        Returns:
            NoteResponse, or None when no document has this id

        Raises:
            MalformedIdError: note_id is not a valid object id
            DatabaseError: query execution failed
        """
        object_id = parse_object_id(note_id)
        try:
            note = await db.get(Note, object_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", object_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note.",
                context={"note_id": object_id, "error_type": type(e).__name__},
            ) from e
        if note is None:
            return None
        return NoteResponse.model_validate(note)

    async def create(
        self,
        db: AsyncSession,
        content: Optional[str],
        important: Optional[bool] = False,
        date: Optional[datetime] = None,
    ) -> NoteResponse:
        """
        Validate and insert a note. `date` defaults to the current UTC time.

        Raises:
            DocumentValidationError: content missing or too short
            DatabaseError: insert failed
        """
        if date is None:
            date = datetime.now(timezone.utc)
        validate_document({"content": content, "date": date})

        note = Note(content=content, important=important, date=date)
        try:
            db.add(note)
            await db.flush()  # assigns the object id
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the note.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Note %s created", note.id)
        return NoteResponse.model_validate(note)

    async def find_by_id_and_update(
        self,
        db: AsyncSession,
        note_id: str,
        changes: Dict[str, Any],
    ) -> Optional[NoteResponse]:
        """
        Replace `content` and/or `important` on an existing note.

        Only keys present in `changes` are written and validated; `id` and
        `date` never change. Concurrent updates are last-write-wins.

        Returns:
            The updated NoteResponse, or None when no document has this id

        Raises:
            MalformedIdError: note_id is not a valid object id
            DocumentValidationError: new content breaks a rule
            DatabaseError: query or update failed
        """
        object_id = parse_object_id(note_id)
        changes = {key: value for key, value in changes.items() if key in ("content", "important")}
        validate_document(
            changes,
            paths=["content"] if "content" in changes else [],
            prefix=UPDATE_VALIDATION_PREFIX,
        )

        try:
            note = await db.get(Note, object_id)
            if note is None:
                return None
            for key, value in changes.items():
                setattr(note, key, value)
            note.revision += 1
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", object_id, str(e))
            raise DatabaseError(
                message="Could not update the note.",
                context={"note_id": object_id, "error_type": type(e).__name__},
            ) from e

        logger.info("Note %s updated (%s)", object_id, ", ".join(sorted(changes)) or "no fields")
        return NoteResponse.model_validate(note)

    async def find_by_id_and_remove(self, db: AsyncSession, note_id: str) -> bool:
        """Delete a note. Returns whether a document was actually removed."""
        object_id = parse_object_id(note_id)
        try:
            result = await db.execute(delete(Note).where(Note.id == object_id))
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", object_id, str(e))
            raise DatabaseError(
                message="Could not delete the note.",
                context={"note_id": object_id, "error_type": type(e).__name__},
            ) from e

        removed = (result.rowcount or 0) > 0
        if removed:
            logger.info("Note %s deleted", object_id)
        return removed


note_service = NoteService()
