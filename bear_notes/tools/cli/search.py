from __future__ import annotations

from rich.markup import escape
from typer import Argument, Context, Option

from ...core import BearError, Session, detect
from ..utils import read_pipe
from ._utils import (
    console,
    fail,
    get_root_context,
    logger,
    print_notes,
)

MAX_SCANNED_NOTES = 10
"""
Number of today's notes to check for embedded ids.
"""


def search(
    ctx: Context,
    term: str
    | None = Argument(
        None,
        help="String to search, read from stdin if piped",
        show_default=False,
    ),
    tag: str
    | None = Option(
        None,
        "--tag",
        "-t",
        help="Tag to search in",
    ),
    token: str
    | None = Option(
        None,
        "--token",
        help="Bear API token, overrides the one given to `bear`",
        show_default=False,
    ),
    detect_embedded: bool = Option(
        False,
        "--detect-embedded",
        help=f"Instead of searching, check up to {MAX_SCANNED_NOTES} of today's notes for embedded note ids",
    ),
):
    """
    Search all notes or notes with a specific tag, listing their ids and
    titles. Requires an API token.
    """

    root_context = get_root_context(ctx)
    session = root_context.create_session(token=token)

    try:
        if detect_embedded:
            _detect_embedded(session)
            return

        term = term or read_pipe().strip() or None
        notes = session.search(term, tag=tag)
    except BearError as e:
        raise fail(e)

    if not notes:
        logger.info("No notes found")
        return

    print_notes(notes)


def _detect_embedded(session: Session):
    """
    Report embedded ids found in today's notes and whether they match.
    """
    logger.info("Searching for notes with embedded note ids")

    notes = session.today()[:MAX_SCANNED_NOTES]

    if not notes:
        logger.info("No recent notes found")
        return

    found = 0

    for note in notes:
        logger.info(f"Checking: {note.title}")

        try:
            contents = session.open_note(note_id=note.identifier)
        except BearError as e:
            logger.warning(f"Could not read note {note.identifier}: {e}")
            continue

        embedded_id = detect(contents.note)
        if embedded_id is None:
            continue

        found += 1
        status = (
            "[green]matching[/green]"
            if embedded_id == note.identifier
            else "[yellow]mismatched[/yellow]"
        )

        console.print(f"[bold]{escape(note.title)}[/bold]", highlight=False)
        console.print(f"  Bear id:     {note.identifier}", highlight=False)
        console.print(f"  Embedded id: {embedded_id} ({status})", highlight=False)

    if found:
        logger.info(f"Found {found} note(s) with embedded ids")
    else:
        logger.info("No notes with embedded note ids in recent notes")
