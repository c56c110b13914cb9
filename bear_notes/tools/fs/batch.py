"""
Reconciliation of a collection of note files.

Files are processed strictly one after another; a failure is recorded
against the file and processing continues with the next one.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from logging import Logger
from pathlib import Path
from typing import Iterable

from ...core.footer.builder import FooterFlags
from ...core.footer.marker import detect
from ...core.policy import LookupErrorPolicy, Outcome, reconcile
from ...core.store import Mode, NoteStore
from .files import read_note_file
from .note import write_back

__all__ = [
    "BatchStats",
    "batch_reconcile",
    "batch_update",
]


@dataclass(kw_only=True)
class BatchStats:
    """
    Encapsulates statistics for batch operation.
    """

    file_count: int = 0
    """
    Number of files submitted.
    """

    processed: int = 0
    """
    Number of files reconciled, or which would be in a dry run.
    """

    updated: int = 0
    """
    Number of existing notes updated.
    """

    created: int = 0
    """
    Number of notes created for files whose id wasn't found.
    """

    skipped: int = 0
    """
    Number of files without an embedded id.
    """

    errored: int = 0
    """
    Number of files which failed.
    """

    @property
    def complete(self) -> bool:
        """
        Whether every file was processed without error.
        """
        return self.errored == 0 and self.processed == self.file_count


def batch_reconcile(
    items: Iterable[tuple[Path, str]],
    store: NoteStore,
    *,
    flags: FooterFlags,
    mode: Mode = Mode.REPLACE_ALL,
    write: bool = True,
    dry_run: bool = False,
    now: datetime.datetime | None = None,
    logger: Logger | None = None,
) -> BatchStats:
    """
    Reconcile bodies read from files. Only bodies which already carry an
    embedded id are reconciled; others are skipped.
    """
    logger = logger or logging.getLogger()
    stats = BatchStats()

    for path, body in items:
        stats.file_count += 1
        _process(
            path,
            body,
            store,
            stats,
            flags=flags,
            mode=mode,
            write=write,
            dry_run=dry_run,
            now=now,
            logger=logger,
        )

    return stats


def batch_update(
    paths: Iterable[Path],
    store: NoteStore,
    *,
    flags: FooterFlags,
    mode: Mode = Mode.REPLACE_ALL,
    write: bool = True,
    dry_run: bool = False,
    now: datetime.datetime | None = None,
    logger: Logger | None = None,
) -> BatchStats:
    """
    Read and reconcile note files. A file which can't be read counts as
    errored.
    """
    logger = logger or logging.getLogger()
    stats = BatchStats()

    for path in paths:
        stats.file_count += 1

        try:
            body = read_note_file(path)
        except Exception as e:
            logger.error(f"Error processing '{path}': {e}")
            stats.errored += 1
            continue

        _process(
            path,
            body,
            store,
            stats,
            flags=flags,
            mode=mode,
            write=write,
            dry_run=dry_run,
            now=now,
            logger=logger,
        )

    return stats


def _process(
    path: Path,
    body: str,
    store: NoteStore,
    stats: BatchStats,
    *,
    flags: FooterFlags,
    mode: Mode,
    write: bool,
    dry_run: bool,
    now: datetime.datetime | None,
    logger: Logger,
):
    """
    Reconcile one file, recording the outcome in stats.
    """
    note_id = detect(body)

    if note_id is None:
        logger.info(f"Skipping '{path}': no note id found")
        stats.skipped += 1
        return

    if dry_run:
        logger.info(f"Would update note {note_id} from '{path}'")
        stats.processed += 1
        return

    try:
        result = reconcile(
            body,
            store,
            flags=flags,
            now=now,
            mode=mode,
            lookup_errors=LookupErrorPolicy.ASSUME_MISSING,
            logger=logger,
        )

        # only persist once the store accepted the body
        if write:
            write_back(path, body, result.body, logger=logger)

    except Exception as e:
        logger.error(f"Error processing '{path}': {e}")
        stats.errored += 1
        return

    if result.outcome is Outcome.UPDATE:
        stats.updated += 1
    else:
        stats.created += 1

    stats.processed += 1
