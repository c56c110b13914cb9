"""
Utilities specific to CLI functionality.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from click import BadParameter, MissingParameter, Parameter
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from typer import Context, Exit, Typer

from ...core import BearError, NoteContents, NoteInfo
from ..fs.files import read_note_file, resolve_path
from ..utils import read_pipe

if TYPE_CHECKING:
    from .main import RootContext


console = Console()

rich_handler = RichHandler(
    console=console,
    rich_tracebacks=True,
    show_level=True,
    show_time=False,
    show_path=False,
)
rich_handler.setFormatter(logging.Formatter("%(message)s"))

logger = logging.getLogger("bear-notes")
logger.setLevel(logging.INFO)
logger.addHandler(rich_handler)
logger.propagate = False

PREVIEW_SIZE = 200
"""
Number of characters of note content to show in previews.
"""


class MainTyper(Typer):
    """
    Typer app with preconfigured settings.
    """

    def __init__(self, name: str, *, help: str):
        return super().__init__(
            name=name,
            help=help,
            rich_markup_mode="markdown",
            no_args_is_help=True,
            add_completion=False,
        )


def get_root_context(ctx: Context) -> RootContext:
    from .main import RootContext

    root_context = ctx.find_object(RootContext)
    assert isinstance(root_context, RootContext)
    return root_context


def lookup_param(ctx: Context, name: str) -> Parameter:
    """
    Lookup param by name.
    """
    param = next((p for p in ctx.command.params if p.name == name), None)
    assert param, f"Could not find param with name: {name}"
    return param


def get_text(
    ctx: Context,
    text: str | None,
    *,
    text_param: str,
    content_file: Path | None = None,
    required: bool = True,
) -> tuple[str | None, Path | None]:
    """
    Get note text from content file, argument or stdin, in that order of
    precedence. Also returns the resolved content file, if any.
    """
    if content_file:
        path = resolve_path(content_file)

        if not path.is_file():
            raise BadParameter(
                f"content file not found: '{content_file}' (resolved: '{path}')",
                ctx=ctx,
                param=lookup_param(ctx, "content_file"),
            )

        try:
            text = read_note_file(path)
        except BearError as e:
            raise BadParameter(
                str(e), ctx=ctx, param=lookup_param(ctx, "content_file")
            )

        logger.info(f"Content loaded from '{path}'")
        return text, path

    if not text:
        text = read_pipe() or None

    if not text and required:
        raise MissingParameter(
            message="pass as argument, via stdin or with --content-file",
            ctx=ctx,
            param=lookup_param(ctx, text_param),
        )

    return text, None


def fail(error: Exception) -> Exit:
    """
    Log error and get exit to raise.
    """
    logger.error(str(error))
    return Exit(code=1)


def print_note_info(note: NoteInfo):
    console.print(note.identifier, highlight=False)

    if note.title:
        console.print(note.title, highlight=False)


def print_note_contents(contents: NoteContents):
    console.print(contents.note, markup=False, highlight=False)


def print_notes(notes: list[NoteInfo], *, title: str | None = None):
    table = Table(title=title)
    table.add_column("Identifier", no_wrap=True)
    table.add_column("Title")

    for note in notes:
        table.add_row(note.identifier, escape(note.title))

    console.print(table)


def preview(text: str) -> str:
    """
    Get beginning of text for display.
    """
    if len(text) > PREVIEW_SIZE:
        return text[:PREVIEW_SIZE] + "..."
    return text
