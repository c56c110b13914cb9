"""
Interactive update of a note selected by id, title or search term.
"""
from __future__ import annotations

from pathlib import Path

import typer
from click import BadParameter, MissingParameter
from typer import Argument, Context, Option

from ...core import (
    BearError,
    LookupErrorPolicy,
    Mode,
    NoteInfo,
    Session,
    detect,
    reconcile,
)
from ._utils import (
    console,
    fail,
    get_root_context,
    get_text,
    logger,
    lookup_param,
    preview,
    print_note_contents,
    print_notes,
)
from .add_text import resolve_title

MAX_LISTED_RESULTS = 5
"""
Number of search results to list when a search matches several notes.
"""


def update(
    ctx: Context,
    content: str
    | None = Argument(
        None,
        help="Content to add to note, read from stdin if not given",
        show_default=False,
    ),
    note_id: str
    | None = Option(
        None,
        "--id",
        help="Id of note to update",
    ),
    title: str
    | None = Option(
        None,
        help="Title of note to update",
    ),
    search_term: str
    | None = Option(
        None,
        "--search-term",
        "-s",
        help="Search term to find note if no id or title given; first result is used",
    ),
    mode: Mode = Option(
        Mode.APPEND,
        help="How to add content to the note",
    ),
    header: str
    | None = Option(
        None,
        help="Header of note section to add content to",
    ),
    new_line: bool = Option(
        False,
        "--new-line",
        help="Add content on a new line when appending",
    ),
    tag: list[str]
    | None = Option(
        None,
        "--tag",
        "-t",
        help="Tag to add to note, may be passed multiple times",
    ),
    exclude_trashed: bool = Option(
        False,
        "--exclude-trashed",
        help="Don't match notes in trash",
    ),
    timestamp: bool = Option(
        False,
        "--timestamp",
        help="Prepend current date and time to content",
    ),
    content_file: Path
    | None = Option(
        None,
        "--content-file",
        "-f",
        help="Read content from file; '~' is expanded",
        dir_okay=False,
    ),
    creation_date: bool
    | None = Option(
        None,
        "--creation-date/--no-creation-date",
        help="Add footer with creation and update dates",
        show_default=False,
    ),
    add_id: bool
    | None = Option(
        None,
        "--add-id/--no-add-id",
        help="Add footer with note id as html comment",
        show_default=False,
    ),
    yes: bool = Option(
        False,
        "-y",
        "--yes",
        "--no-confirm",
        help="Don't show current content or ask for confirmation",
    ),
    view_updated: bool = Option(
        False,
        "-v",
        "--view-updated",
        help="Show updated content after update",
    ),
):
    """
    Update a note with content, optionally adding a footer with dates and
    note id. The note is selected by id, title or search term.

    Examples:

    - `bear update "New content" --id ABC123`
    - `bear update --search-term meeting --mode append`
    - `bear update --content-file ./notes.md --title "Daily Notes" --creation-date --add-id`
    """

    root_context = get_root_context(ctx)

    body, _ = get_text(
        ctx, content, text_param="content", content_file=content_file
    )
    assert body is not None

    if not (note_id or title or search_term):
        raise MissingParameter(
            message="use --id, --title or --search-term to identify the note",
            ctx=ctx,
            param=lookup_param(ctx, "note_id"),
        )

    flags = root_context.get_flags(creation_date=creation_date, add_id=add_id)
    session = root_context.create_session()

    try:
        if not (note_id or title):
            assert search_term
            note = _find_note(ctx, session, search_term)
            note_id = note.identifier
            logger.info(f"Found note: {note.title}")

        note_id = note_id or resolve_title(session, title, exclude_trashed)
        current = session.open_note(note_id=note_id)
    except BearError as e:
        raise fail(e)

    _check_embedded_id(note_id, current.note)

    if not yes:
        console.rule("Current content")
        console.print(preview(current.note), markup=False, highlight=False)
        console.rule()

        if not typer.confirm(f"Update note with {mode} mode?"):
            logger.info("Update cancelled")
            return

    try:
        result = reconcile(
            body,
            session,
            flags=flags,
            supplied_id=note_id,
            mode=mode,
            update_params={
                "header": header,
                "new_line": new_line,
                "tags": tag,
                "exclude_trashed": exclude_trashed,
                "timestamp": timestamp,
            },
            lookup_errors=LookupErrorPolicy.RAISE,
            create_missing=False,
            logger=logger,
        )

        updated = session.open_note(note_id=result.remote_id or note_id)
    except BearError as e:
        raise fail(e)

    features = [
        name
        for name, enabled in [
            ("creation date", flags.creation_date),
            ("note id", flags.add_id),
            ("timestamp", timestamp),
        ]
        if enabled
    ]

    if features:
        logger.info(f"Note updated with {', '.join(features)}")
    else:
        logger.info("Note updated")

    if view_updated:
        console.rule("Updated content")
        print_note_contents(updated)
        console.rule()
    else:
        print_note_contents(updated)


def _find_note(ctx: Context, session: Session, search_term: str) -> NoteInfo:
    """
    Get first note matching search term.
    """
    logger.info(f"Searching for notes containing '{search_term}'")
    notes = session.search(search_term)

    if not notes:
        raise BadParameter(
            f"no notes found matching '{search_term}'",
            ctx=ctx,
            param=lookup_param(ctx, "search_term"),
        )

    if len(notes) > 1:
        print_notes(
            notes[:MAX_LISTED_RESULTS], title=f"Found {len(notes)} notes"
        )

        if len(notes) > MAX_LISTED_RESULTS:
            console.print(f"... and {len(notes) - MAX_LISTED_RESULTS} more")

        logger.info(f"Using first result: {notes[0].title}")

    return notes[0]


def _check_embedded_id(note_id: str, text: str):
    """
    Compare id embedded in the note's current content with its actual id.
    """
    embedded_id = detect(text)

    if embedded_id is None:
        return

    if embedded_id == note_id:
        logger.info("Note has matching embedded id")
    else:
        logger.warning(
            f"Embedded note id {embedded_id} doesn't match note id {note_id}; the note may have been duplicated or moved"
        )
