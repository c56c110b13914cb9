"""
Utilities for generic tool-related functionality.
"""
from __future__ import annotations

import sys
from typing import TextIO

__all__ = [
    "read_pipe",
]


def read_pipe(stream: TextIO | None = None) -> str:
    """
    Read text piped to stdin, or empty string if stdin is a terminal.
    """
    stream = stream or sys.stdin

    if stream is None or stream.isatty():
        return ""

    return stream.read()
