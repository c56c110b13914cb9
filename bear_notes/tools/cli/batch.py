"""
Batch update of notes from markdown files in a folder.
"""
from __future__ import annotations

from pathlib import Path

from click import BadParameter
from rich.table import Table
from typer import Argument, Context, Exit, Option

from ...core import Mode
from ..fs.batch import BatchStats, batch_update as batch_update_files
from ..fs.files import find_note_files, resolve_path
from ._utils import console, get_root_context, logger, lookup_param


def batch_update(
    ctx: Context,
    directory: Path = Argument(
        help="Folder containing markdown files; '~' is expanded",
        show_default=False,
    ),
    recursive: bool
    | None = Option(
        None,
        "--recursive/--no-recursive",
        "-r",
        help="Process subfolders, skipping hidden ones",
        show_default=False,
    ),
    pattern: str
    | None = Option(
        None,
        "--pattern",
        "-p",
        help="Glob pattern of files to process [default: *.md]",
        show_default=False,
    ),
    mode: Mode
    | None = Option(
        None,
        help="How to apply file contents to notes [default: replace_all]",
        show_default=False,
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
    write_back: bool
    | None = Option(
        None,
        "--write-back/--no-write-back",
        "-w",
        help="Write enhanced content back to files [default: write-back]",
        show_default=False,
    ),
    dry_run: bool = Option(
        False,
        "--dry-run",
        "-n",
        help="Only log which notes would be updated",
    ),
):
    """
    Update notes from markdown files which have an embedded note id. Files
    without an id are skipped; notes which no longer exist are created.
    """

    root_context = get_root_context(ctx)
    batch_config = root_context.config.batch

    recursive = batch_config.recursive if recursive is None else recursive
    pattern = pattern or batch_config.pattern
    mode = mode or batch_config.mode
    write_back = batch_config.write_back if write_back is None else write_back

    resolved_dir = resolve_path(directory)

    if not resolved_dir.is_dir():
        raise BadParameter(
            f"folder does not exist: '{directory}' (resolved: '{resolved_dir}')",
            ctx=ctx,
            param=lookup_param(ctx, "directory"),
        )

    flags = root_context.get_flags(creation_date=creation_date, add_id=add_id)

    logger.info(
        f"Batch update of '{resolved_dir}': pattern={pattern}, recursive={recursive}, mode={mode}, write-back={write_back}, dry-run={dry_run}"
    )

    files = find_note_files(resolved_dir, pattern=pattern, recursive=recursive)

    if not files:
        logger.warning(f"No files found matching pattern: {pattern}")
        return

    logger.info(f"Found {len(files)} file(s) to process")

    session = root_context.create_session()
    stats = batch_update_files(
        files,
        session,
        flags=flags,
        mode=mode,
        write=write_back,
        dry_run=dry_run,
        logger=logger,
    )

    _print_summary(stats)

    if stats.errored:
        logger.warning(f"Completed with {stats.errored} error(s)")
        raise Exit(code=1)

    if stats.complete:
        logger.info("All files processed successfully")


def _print_summary(stats: BatchStats):
    table = Table(title="Batch update summary")
    table.add_column("Result")
    table.add_column("Count", justify="right")

    table.add_row("Processed", f"{stats.processed}/{stats.file_count}")
    table.add_row("Updated", str(stats.updated))
    table.add_row("Created", str(stats.created))
    table.add_row("Skipped", str(stats.skipped))
    table.add_row("Errors", str(stats.errored))

    console.print(table)
