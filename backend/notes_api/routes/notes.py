"""
Notes API — Notes Route Handlers
=================================

What:  CRUD endpoints for notes under /api/notes.
How:   Each handler validates its input, makes one store call through
       NoteService, and shapes the response. Store failures are not caught
       here; they propagate to the global exception handlers.

Endpoints:
    GET    /api/notes        → 200 [Note]   (also /api/notes/)
    GET    /api/notes/{id}   → 200 Note | 404 empty
    POST   /api/notes        → 200 Note | 400 {"error": ...}   (also /api/notes/)
    PUT    /api/notes/{id}   → 200 Note | 404 empty
    DELETE /api/notes/{id}   → 204 empty (whether or not the note existed)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.database import get_db_session
from notes_api.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from notes_api.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

_MALFORMED_ID = {"description": "Malformed id", "model": ErrorResponse}


@router.get("/", response_model=List[NoteResponse], include_in_schema=False)
@router.get(
    "",
    response_model=List[NoteResponse],
    summary="List every note",
)
async def list_notes(db: AsyncSession = Depends(get_db_session)) -> List[NoteResponse]:
    return await note_service.find_all(db)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        400: _MALFORMED_ID,
        404: {"description": "No note with this id (empty body)"},
    },
    summary="Get a single note by id",
)
async def get_note(note_id: str, db: AsyncSession = Depends(get_db_session)):
    """
    Fetch one note.

    A well-formed id that names no document is a normal outcome and is
    answered with 404 and no body. A malformed id raises MalformedIdError,
    which the error handlers turn into 400.
    """
    note = await note_service.find_by_id(db, note_id)
    if note is None:
        return Response(status_code=404)
    return note


@router.post("/", response_model=NoteResponse, include_in_schema=False)
@router.post(
    "",
    response_model=NoteResponse,
    responses={400: {"description": "Content missing or invalid", "model": ErrorResponse}},
    summary="Create a note",
)
async def create_note(
    payload: Optional[NoteCreate] = None,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Create a note from `{content, important?}`.

    Answers 200 (not 201) with the stored note. `important` falls back to
    false for any falsy value, so an explicit false and an omitted flag are
    indistinguishable. `date` is always set server-side.
    """
    if payload is None or not payload.content:
        return JSONResponse(status_code=400, content={"error": "content missing"})

    return await note_service.create(
        db,
        content=payload.content,
        important=payload.important or False,
    )


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Malformed id or invalid content", "model": ErrorResponse},
        404: {"description": "No note with this id (empty body)"},
    },
    summary="Update a note's content and importance",
)
async def update_note(
    note_id: str,
    payload: Optional[NoteUpdate] = None,
    db: AsyncSession = Depends(get_db_session),
):
    changes = payload.changes() if payload is not None else {}
    note = await note_service.find_by_id_and_update(db, note_id, changes)
    if note is None:
        return Response(status_code=404)
    return note


@router.delete(
    "/{note_id}",
    status_code=204,
    response_class=Response,
    responses={400: _MALFORMED_ID},
    summary="Delete a note",
)
async def delete_note(note_id: str, db: AsyncSession = Depends(get_db_session)) -> Response:
    removed = await note_service.find_by_id_and_remove(db, note_id)
    if not removed:
        logger.debug("Delete of absent note %s", note_id)
    return Response(status_code=204)
