from __future__ import annotations

from pathlib import Path

from click import BadParameter
from typer import Argument, Context, Option

from ...core import BearError, LookupErrorPolicy, Outcome, reconcile
from ..fs.note import write_back
from ._utils import console, fail, get_root_context, get_text, logger, lookup_param


def create(
    ctx: Context,
    text: str
    | None = Argument(
        None,
        help="Note body, read from stdin if not given",
        show_default=False,
    ),
    title: str
    | None = Option(
        None,
        help="Note title",
    ),
    tag: list[str]
    | None = Option(
        None,
        "--tag",
        "-t",
        help="Tag for note, may be passed multiple times",
    ),
    pin: bool = Option(
        False,
        "--pin",
        help="Pin note to top of note list",
    ),
    open_note: bool = Option(
        False,
        "--open-note",
        help="Open note in Bear after creating it",
    ),
    timestamp: bool = Option(
        False,
        "--timestamp",
        help="Prepend current date and time to text",
    ),
    show_window: bool = Option(
        False,
        "--show-window",
        help="Show Bear window after creating note",
    ),
    content_file: Path
    | None = Option(
        None,
        "--content-file",
        "-f",
        help="Read note body from file; '~' is expanded",
        dir_okay=False,
    ),
    creation_date: bool
    | None = Option(
        None,
        "--creation-date/--no-creation-date",
        help="Add footer with creation date",
        show_default=False,
    ),
    add_id: bool
    | None = Option(
        None,
        "--add-id/--no-add-id",
        help="Add footer with note id as html comment",
        show_default=False,
    ),
    write: bool = Option(
        False,
        "--write-back",
        "-w",
        help="Write enhanced content back to --content-file",
    ),
):
    """
    Create a new note and print its id. If the body already has an embedded
    note id, that note is updated instead. Empty notes are not allowed.
    """

    root_context = get_root_context(ctx)

    body, path = get_text(
        ctx, text, text_param="text", content_file=content_file
    )
    assert body is not None

    if write and not path:
        raise BadParameter(
            "requires --content-file",
            ctx=ctx,
            param=lookup_param(ctx, "write"),
        )

    flags = root_context.get_flags(creation_date=creation_date, add_id=add_id)
    session = root_context.create_session()

    create_params = {
        "title": title,
        "tags": tag,
        "pin": pin,
        "open_note": open_note,
        "timestamp": timestamp,
    }

    if show_window:
        create_params["show_window"] = True

    try:
        result = reconcile(
            body,
            session,
            flags=flags,
            create_params=create_params,
            update_params={
                "tags": tag,
                "open_note": open_note,
            },
            lookup_errors=LookupErrorPolicy.RAISE,
            logger=logger,
        )

        if path and write:
            write_back(path, body, result.body, logger=logger)

    except BearError as e:
        raise fail(e)

    if result.outcome is Outcome.UPDATE:
        logger.info("Body has embedded note id, updated existing note")

    console.print(result.remote_id or result.note_id, highlight=False)
