from __future__ import annotations

from pathlib import Path

from click import MissingParameter
from typer import Argument, Context, Option

from ...core import (
    BearError,
    LookupErrorPolicy,
    Mode,
    NotFoundError,
    Session,
    reconcile,
)
from ._utils import (
    fail,
    get_root_context,
    get_text,
    logger,
    lookup_param,
    print_note_contents,
)


def add_text(
    ctx: Context,
    text: str
    | None = Argument(
        None,
        help="Text to add, read from stdin if not given",
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
        help="Title of note to update, if no id given",
    ),
    mode: Mode = Option(
        Mode.APPEND,
        help="How to add text to the note",
    ),
    header: str
    | None = Option(
        None,
        help="Header of note section to add text to",
    ),
    new_line: bool = Option(
        False,
        "--new-line",
        help="Add text on a new line when appending",
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
        help="Prepend current date and time to text",
    ),
    content_file: Path
    | None = Option(
        None,
        "--content-file",
        "-f",
        help="Read text from file; '~' is expanded",
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
):
    """
    Add text to a note identified by its id or title, and print the note's
    contents. Encrypted notes can't be accessed.
    """

    root_context = get_root_context(ctx)

    if not (note_id or title):
        raise MissingParameter(
            message="either --id or --title must be provided",
            ctx=ctx,
            param=lookup_param(ctx, "note_id"),
        )

    body, _ = get_text(ctx, text, text_param="text", content_file=content_file)
    assert body is not None

    flags = root_context.get_flags(creation_date=creation_date, add_id=add_id)
    session = root_context.create_session()

    try:
        note_id = note_id or resolve_title(session, title, exclude_trashed)

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

        contents = session.open_note(note_id=result.remote_id or note_id)
    except BearError as e:
        raise fail(e)

    if flags.enabled:
        logger.info("Note updated with footer")

    print_note_contents(contents)


def resolve_title(
    session: Session, title: str | None, exclude_trashed: bool = False
) -> str:
    """
    Get id of note with the given title.
    """
    assert title

    contents = session.open_note(title=title, exclude_trashed=exclude_trashed)
    if not contents.identifier:
        raise NotFoundError(None, f"Note not found: {title}")

    logger.info(f"Found note '{title}': {contents.identifier}")
    return contents.identifier
