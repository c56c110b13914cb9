"""
Abstract interface to the remote note store, as consumed by the
reconciliation policy.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Any, Mapping

__all__ = [
    "Mode",
    "NoteStore",
]


class Mode(StrEnum):
    """
    How text is applied to an existing note.
    """

    PREPEND = "prepend"
    APPEND = "append"
    REPLACE_ALL = "replace_all"
    """Replace whole note including title"""

    REPLACE = "replace"
    """Replace note body, keeping title"""


class NoteStore(ABC):
    """
    Minimal capabilities of a note store: check whether a note exists and
    write text to a new or existing note.
    """

    @abstractmethod
    def exists(self, note_id: str) -> bool:
        """
        Check whether note exists. Raises {obj}`BearCallError` if the store
        couldn't be queried.
        """
        ...

    @abstractmethod
    def apply(
        self,
        note_id: str | None,
        text: str,
        *,
        mode: Mode = Mode.REPLACE_ALL,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        """
        Create a note if `note_id` is `None`, else write text to the note
        using the given mode. Returns the identifier of the note written.

        `params` holds additional store-specific options, e.g. tags.
        """
        ...
