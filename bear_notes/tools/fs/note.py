"""
Reconciliation of a single note file.
"""
from __future__ import annotations

import datetime
import logging
from logging import Logger
from pathlib import Path
from typing import Any, Mapping

from ...core.footer.builder import FooterFlags
from ...core.policy import LookupErrorPolicy, Reconciliation, reconcile
from ...core.store import Mode, NoteStore
from .files import read_note_file, write_note_file

__all__ = [
    "reconcile_file",
    "write_back",
]


def reconcile_file(
    path: Path,
    store: NoteStore,
    *,
    flags: FooterFlags,
    supplied_id: str | None = None,
    mode: Mode = Mode.REPLACE_ALL,
    create_params: Mapping[str, Any] | None = None,
    update_params: Mapping[str, Any] | None = None,
    write: bool = False,
    now: datetime.datetime | None = None,
    lookup_errors: LookupErrorPolicy = LookupErrorPolicy.RAISE,
    logger: Logger | None = None,
) -> Reconciliation:
    """
    Create or update the note corresponding to a file, optionally writing
    the enhanced body back to the file once the store accepted it.

    Errors are propagated to the caller.
    """
    logger = logger or logging.getLogger()

    body = read_note_file(path)
    result = reconcile(
        body,
        store,
        flags=flags,
        supplied_id=supplied_id,
        now=now,
        mode=mode,
        create_params=create_params,
        update_params=update_params,
        lookup_errors=lookup_errors,
        logger=logger,
    )

    if write:
        write_back(path, body, result.body, logger=logger)

    return result


def write_back(
    path: Path,
    current_body: str,
    enhanced_body: str,
    *,
    logger: Logger | None = None,
) -> bool:
    """
    Write enhanced body to file if it differs from the current one, returning
    whether the file was written.
    """
    logger = logger or logging.getLogger()

    if enhanced_body == current_body:
        logger.debug(f"File already up to date: '{path}'")
        return False

    write_note_file(path, enhanced_body)
    logger.info(f"Wrote enhanced content to '{path}'")

    return True
