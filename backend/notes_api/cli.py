"""
Notes API — Command Line Interface
===================================

What:  Operator commands for the note store and the HTTP server.
How:   click group; store commands open a session_scope() and call the same
       NoteService the HTTP routes use, so validation rules are identical.

Commands:
    notes-api serve                 run the API with uvicorn
    notes-api init-db               create the notes table
    notes-api list                  print every note
    notes-api add CONTENT [--important]
"""

import asyncio
import logging
from typing import List, Optional

import click

from notes_api.config import settings
from notes_api.database import create_tables, dispose_engine, session_scope
from notes_api.exceptions import DocumentValidationError
from notes_api.schemas.note import NoteResponse
from notes_api.services.note_service import note_service

logger = logging.getLogger(__name__)


def _format_note(note: NoteResponse) -> str:
    flag = "!" if note.important else " "
    return f"{note.id} {flag} {note.date.isoformat()}  {note.content}"


async def _list_notes() -> List[NoteResponse]:
    try:
        async with session_scope() as db:
            return await note_service.find_all(db)
    finally:
        await dispose_engine()


async def _add_note(content: str, important: bool) -> NoteResponse:
    try:
        async with session_scope() as db:
            return await note_service.create(db, content=content, important=important)
    finally:
        await dispose_engine()


async def _init_db() -> None:
    try:
        await create_tables()
    finally:
        await dispose_engine()


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL for this command.")
def cli(log_level: Optional[str]) -> None:
    """Manage the notes store and run the Notes API."""
    logging.basicConfig(
        level=getattr(logging, (log_level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@cli.command()
@click.option("--host", default=None, help="Bind address (default: BACKEND_HOST).")
@click.option("--port", type=int, default=None, help="Listen port (default: PORT).")
@click.option("--reload", is_flag=True, help="Restart on code changes (development).")
def serve(host: Optional[str], port: Optional[int], reload: bool) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "notes_api.main:app",
        host=host or settings.backend_host,
        port=port or settings.backend_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command("init-db")
def init_db() -> None:
    """Create the notes table if it does not exist."""
    asyncio.run(_init_db())
    click.echo("notes table ready")


@cli.command("list")
def list_notes() -> None:
    """Print every note in the store."""
    notes = asyncio.run(_list_notes())
    if not notes:
        click.echo("no notes")
        return
    click.echo("notes:")
    for note in notes:
        click.echo(_format_note(note))


@cli.command()
@click.argument("content")
@click.option("--important", is_flag=True, help="Mark the note as important.")
def add(content: str, important: bool) -> None:
    """Create a note with CONTENT."""
    try:
        note = asyncio.run(_add_note(content, important))
    except DocumentValidationError as e:
        raise click.ClickException(e.message) from e
    click.echo(f"note saved! {_format_note(note)}")


if __name__ == "__main__":
    cli()
