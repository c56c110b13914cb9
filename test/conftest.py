import datetime
import logging
from typing import Any, Mapping

from pytest import fixture

from bear_notes import (
    BearCallError,
    Mode,
    NoteContents,
    NoteInfo,
    NoteStore,
    NotFoundError,
)

logging.basicConfig(level=logging.WARNING)

NOW = datetime.datetime(
    2025, 1, 6, 15, 4, tzinfo=datetime.timezone(datetime.timedelta(hours=2))
)
"""
Fixed time used to render footers: Mon, Jan 6, 2025, 03:04 PM GMT+2.
"""


class FakeBear(NoteStore):
    """
    In-memory stand-in for a Bear session.
    """

    notes: dict[str, str]
    """
    Mapping of note id to text.
    """

    calls: list[tuple[str | None, str, Mode, Mapping[str, Any] | None]]
    """
    Writes in the order they were made.
    """

    lookup_error: bool = False
    """
    Fail existence checks as if Bear couldn't be reached.
    """

    apply_error: bool = False
    """
    Fail writes as if Bear rejected them.
    """

    search_results: list[NoteInfo]

    def __init__(self):
        self.notes = {}
        self.calls = []
        self.search_results = []
        self._next_id = 1

    def exists(self, note_id: str) -> bool:
        if self.lookup_error:
            raise BearCallError("open-note", "xcall timed out")
        return note_id in self.notes

    def apply(
        self,
        note_id: str | None,
        text: str,
        *,
        mode: Mode = Mode.REPLACE_ALL,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        if self.apply_error:
            raise BearCallError("add-text", "write rejected")

        self.calls.append((note_id, text, mode, params))

        if note_id is None:
            note_id = f"C0FFEE-{self._next_id:04}"
            self._next_id += 1
            self.notes[note_id] = text
            return note_id

        if note_id not in self.notes:
            raise NotFoundError(note_id)

        match mode:
            case Mode.APPEND:
                self.notes[note_id] += "\n" + text
            case Mode.PREPEND:
                self.notes[note_id] = text + "\n" + self.notes[note_id]
            case _:
                self.notes[note_id] = text

        return note_id

    def open_note(
        self,
        *,
        note_id: str | None = None,
        title: str | None = None,
        exclude_trashed: bool = False,
    ) -> NoteContents:
        if note_id is None:
            note_id = next(
                (
                    i
                    for i, text in self.notes.items()
                    if text.splitlines()[:1] == [f"# {title}"]
                ),
                None,
            )

        if note_id is None or note_id not in self.notes:
            raise NotFoundError(note_id)

        text = self.notes[note_id]
        return NoteContents(
            note=text, identifier=note_id, title=text.splitlines()[0]
        )

    def search(
        self, term: str | None = None, *, tag: str | None = None
    ) -> list[NoteInfo]:
        return self.search_results

    def today(self, search: str | None = None) -> list[NoteInfo]:
        return [
            NoteInfo(identifier=note_id, title=text.splitlines()[0])
            for note_id, text in self.notes.items()
        ]


@fixture
def bear() -> FakeBear:
    return FakeBear()


@fixture
def now() -> datetime.datetime:
    return NOW
