"""
Encoding of a note's identifier as an inline HTML comment, e.g.:

```
<!-- Note ID: 4F2C1B7A-0D3E-4A8B-9C6D-1E2F3A4B5C6D -->
```

The comment is invisible when rendered by Bear and is the only link between
a file on disk and the note it was synced to.
"""
from __future__ import annotations

import re

__all__ = [
    "MARKER_PATTERN",
    "NOTE_ID_PATTERN",
    "detect",
    "detect_all",
    "render",
]

NOTE_ID_PATTERN = r"[A-F0-9-]+"
"""
Characters allowed in an identifier: uppercase hex digits and hyphens.
"""

MARKER_PATTERN = rf"<!-- Note ID: ({NOTE_ID_PATTERN}) -->"
"""
Pattern matching a complete marker, capturing the identifier.
"""

_marker_re = re.compile(MARKER_PATTERN)


def detect(body: str) -> str | None:
    """
    Get identifier from first marker in body, or `None` if there is no
    well-formed marker.
    """
    match = _marker_re.search(body)
    return match.group(1) if match else None


def detect_all(body: str) -> list[str]:
    """
    Get identifiers of all markers in body in order of appearance.
    """
    return _marker_re.findall(body)


def render(note_id: str) -> str:
    """
    Get marker line for identifier.
    """
    if not note_id:
        raise ValueError("Cannot render marker for empty note id")

    return f"<!-- Note ID: {note_id} -->"
