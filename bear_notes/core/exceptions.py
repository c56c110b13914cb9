from __future__ import annotations

from pathlib import Path

__all__ = [
    "BearError",
    "NotFoundError",
    "EmptyNoteError",
    "NoteIOError",
    "BearCallError",
]


class BearError(Exception):
    """
    Base class of errors raised by this package.
    """


class NotFoundError(BearError):
    """
    Raised when Bear reports that a note does not exist.

    Whether this is fatal is up to the caller: interactive workflows report
    it and exit, batch workflows treat the note as missing.
    """

    note_id: str | None

    def __init__(self, note_id: str | None, message: str | None = None):
        self.note_id = note_id
        super().__init__(message or f"Note not found: {note_id}")


class EmptyNoteError(BearError):
    """
    Raised when attempting to create a note without content.
    """

    def __init__(self):
        super().__init__("Empty notes are not allowed")


class NoteIOError(BearError):
    """
    Raised when a note file can't be read or written, e.g. missing path,
    permission denied or invalid UTF-8.
    """

    path: Path
    reason: str

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to access note file '{path}': {reason}")


class BearCallError(BearError):
    """
    Raised when an x-callback-url call to Bear fails for a reason other
    than a missing note, e.g. xcall not installed or Bear returning an error.
    """

    action: str
    code: int | None

    def __init__(self, action: str, message: str, code: int | None = None):
        self.action = action
        self.code = code

        code_str = f" (code {code})" if code is not None else ""
        super().__init__(f"Bear call '{action}' failed{code_str}: {message}")
