"""
Policy deciding whether a body corresponds to a new or existing note, and
rendering the body's footer accordingly.

The identity marker embedded in a body is the only persisted link between a
local body and a remote note; no other state is kept between runs.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from enum import Enum, StrEnum, auto
from logging import Logger
from typing import Any, Mapping

from .exceptions import BearCallError, EmptyNoteError, NotFoundError
from .footer.builder import (
    FooterFlags,
    build_creation_footer,
    build_update_footer,
)
from .footer.marker import detect
from .footer.stripper import strip
from .store import Mode, NoteStore

__all__ = [
    "AmbiguousIdentity",
    "LookupErrorPolicy",
    "Outcome",
    "Reconciliation",
    "enhance",
    "plan",
    "reconcile",
    "resolve_identity",
]


class Outcome(StrEnum):
    """
    Decision made for a body.
    """

    CREATE = "create"
    """No identifier known: create a new note"""

    CREATE_WITH_ID = "create-with-id"
    """Identifier known but not found remotely: create, keeping identifier"""

    UPDATE = "update"
    """Identifier found remotely: update that note"""

    SKIP = "skip"
    """No identifier in batch mode: leave untouched"""


class LookupErrorPolicy(Enum):
    """
    How to treat a failure to query the store for a note's existence.
    """

    RAISE = auto()
    """Propagate the error, for interactive use"""

    ASSUME_MISSING = auto()
    """Treat the note as nonexistent, for batch use"""


@dataclass(frozen=True)
class AmbiguousIdentity:
    """
    Supplied identifier disagrees with the one embedded in the body. The
    supplied identifier is used; the notes are not merged.
    """

    supplied_id: str
    embedded_id: str

    def __str__(self) -> str:
        return (
            f"Supplied note id '{self.supplied_id}' differs from embedded "
            f"note id '{self.embedded_id}', using '{self.supplied_id}'"
        )


@dataclass(kw_only=True)
class Reconciliation:
    """
    Result of reconciling a body.
    """

    outcome: Outcome

    note_id: str | None
    """
    Working identifier: supplied, embedded or newly assigned.
    """

    body: str
    """
    Enhanced body: stripped and with the newly rendered footer.
    """

    conflict: AmbiguousIdentity | None = None

    remote_id: str | None = None
    """
    Identifier confirmed by the store upon writing, `None` if not written.
    """


def resolve_identity(
    body: str, supplied_id: str | None = None
) -> tuple[str | None, AmbiguousIdentity | None]:
    """
    Get working identifier for body: the supplied one if given, else the
    embedded one.
    """
    embedded_id = detect(body)

    if not supplied_id:
        return embedded_id, None

    conflict = (
        AmbiguousIdentity(supplied_id=supplied_id, embedded_id=embedded_id)
        if embedded_id and embedded_id != supplied_id
        else None
    )

    return supplied_id, conflict


def enhance(
    body: str,
    note_id: str | None,
    outcome: Outcome,
    flags: FooterFlags,
    now: datetime.datetime,
) -> str:
    """
    Strip existing footer and markers from body and append a footer
    appropriate for the outcome.

    The marker is omitted if no identifier is known yet.
    """
    bare = strip(body)

    if not flags.enabled or outcome is Outcome.SKIP:
        return bare

    build_footer = (
        build_update_footer
        if outcome is Outcome.UPDATE
        else build_creation_footer
    )

    return bare + build_footer(
        note_id,
        include_created=flags.creation_date,
        include_id=flags.add_id and note_id is not None,
        now=now,
    )


def plan(
    body: str,
    store: NoteStore,
    *,
    flags: FooterFlags,
    supplied_id: str | None = None,
    now: datetime.datetime | None = None,
    lookup_errors: LookupErrorPolicy = LookupErrorPolicy.RAISE,
    logger: Logger | None = None,
) -> Reconciliation:
    """
    Decide outcome for body and render its enhanced form without writing
    to the store.
    """
    logger = logger or logging.getLogger()
    now = now or datetime.datetime.now().astimezone()

    note_id, conflict = resolve_identity(body, supplied_id)

    if conflict:
        logger.warning(str(conflict))

    if note_id is None:
        outcome = Outcome.CREATE
    elif _check_exists(store, note_id, lookup_errors, logger):
        outcome = Outcome.UPDATE
    else:
        outcome = Outcome.CREATE_WITH_ID

    return Reconciliation(
        outcome=outcome,
        note_id=note_id,
        body=enhance(body, note_id, outcome, flags, now),
        conflict=conflict,
    )


def reconcile(
    body: str,
    store: NoteStore,
    *,
    flags: FooterFlags,
    supplied_id: str | None = None,
    now: datetime.datetime | None = None,
    mode: Mode = Mode.REPLACE_ALL,
    create_params: Mapping[str, Any] | None = None,
    update_params: Mapping[str, Any] | None = None,
    lookup_errors: LookupErrorPolicy = LookupErrorPolicy.RAISE,
    create_missing: bool = True,
    logger: Logger | None = None,
) -> Reconciliation:
    """
    Reconcile body with the store: create or update the corresponding note
    with the enhanced body.

    If `create_missing` is `False`, an identifier which doesn't exist
    remotely raises {obj}`NotFoundError` instead of creating a new note.
    `create_params` and `update_params` are passed to the store along with
    the body when creating or updating a note respectively, e.g. tags.
    """
    logger = logger or logging.getLogger()
    now = now or datetime.datetime.now().astimezone()

    result = plan(
        body,
        store,
        flags=flags,
        supplied_id=supplied_id,
        now=now,
        lookup_errors=lookup_errors,
        logger=logger,
    )

    match result.outcome:
        case Outcome.CREATE:
            _check_content(body)

            # identifier is only known after creating the note
            remote_id = store.apply(None, result.body, params=create_params)
            logger.info(f"Created note {remote_id}")

            if flags.add_id:
                result.body = enhance(body, remote_id, result.outcome, flags, now)
                store.apply(remote_id, result.body, mode=Mode.REPLACE_ALL)
                logger.info(f"Added footer to note {remote_id}")

            result.note_id = remote_id
            result.remote_id = remote_id

        case Outcome.CREATE_WITH_ID:
            assert result.note_id

            if not create_missing:
                raise NotFoundError(result.note_id)

            _check_content(body)

            logger.warning(
                f"Note {result.note_id} does not exist, creating new note"
            )
            result.remote_id = store.apply(None, result.body, params=create_params)

            if result.remote_id != result.note_id:
                logger.info(
                    f"Bear assigned id {result.remote_id}, footer keeps {result.note_id}"
                )

        case Outcome.UPDATE:
            assert result.note_id

            result.remote_id = store.apply(
                result.note_id, result.body, mode=mode, params=update_params
            )
            logger.info(f"Updated note {result.note_id}")

    return result


def _check_exists(
    store: NoteStore,
    note_id: str,
    lookup_errors: LookupErrorPolicy,
    logger: Logger,
) -> bool:
    try:
        return store.exists(note_id)
    except BearCallError as e:
        if lookup_errors is LookupErrorPolicy.RAISE:
            raise

        logger.warning(f"Could not look up note {note_id}, assuming missing: {e}")
        return False


def _check_content(body: str):
    if not strip(body).strip():
        raise EmptyNoteError()
