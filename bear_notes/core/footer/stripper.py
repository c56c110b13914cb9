"""
Removal of previously rendered footers and stray identity markers, producing
a bare body which is safe to render a new footer onto.
"""
from __future__ import annotations

import re

from .marker import NOTE_ID_PATTERN

__all__ = [
    "normalize",
    "strip",
]

_MARKER = rf"<!-- Note ID: {NOTE_ID_PATTERN} -->"

# complete footer as rendered with the id marker
_footer_re = re.compile(
    r"\n\n---\n"
    r"(?:\*Created:[^\n]*\n)?"
    r"(?:\*Last Updated:[^\n]*\n)?"
    rf"{_MARKER}\s*\Z"
)

# footer as rendered without the id marker
_timestamp_footer_re = re.compile(
    r"\n\n---\n\*Created:[^\n]*(?:\n\*Last Updated:[^\n]*)?\s*\Z"
)

# marker lines at the very beginning of the body
_leading_marker_re = re.compile(rf"\A\s*(?:[ \t]*{_MARKER}[ \t]*(?:\n+|\Z))+")

# marker on a line of its own, capturing newlines on either side
_standalone_marker_re = re.compile(
    rf"(?P<before>\n+)[ \t]*{_MARKER}[ \t]*"
    r"(?=\n|\s*\Z)"
    r"(?=(?P<after>\n*)(?P<end>\s*\Z)?)"
)

# marker sharing a line with other content
_inline_marker_re = re.compile(rf"[ \t]*{_MARKER}[ \t]*")

_trailing_separator_re = re.compile(r"\n\n---\s*\Z")
_trailing_newlines_re = re.compile(r"\n\n+\Z")


def strip(body: str) -> str:
    """
    Remove footer and all identity markers from body.

    Passes are repeated until the body no longer changes, so the result is
    always a fixpoint: `strip(strip(body)) == strip(body)`.
    """
    while True:
        stripped = _strip_pass(body)
        if stripped == body:
            return stripped
        body = stripped


def normalize(body: str) -> str:
    """
    Collapse multiple trailing newlines to a single one.
    """
    return _trailing_newlines_re.sub("\n", body)


def _strip_pass(body: str) -> str:
    # footer rendered by a previous run
    body = _footer_re.sub("", body, count=1)
    body = _timestamp_footer_re.sub("", body, count=1)

    # stray markers anywhere in the body
    body = _leading_marker_re.sub("", body, count=1)
    body = _standalone_marker_re.sub(_replace_standalone, body)
    body = _inline_marker_re.sub(_replace_inline, body)

    # separator left without a footer
    body = _trailing_separator_re.sub("", body)

    return normalize(body)


def _replace_standalone(match: re.Match[str]) -> str:
    """
    Drop a marker line, keeping at most one blank line between the
    surrounding content.
    """
    if match.group("end") is not None:
        return ""

    before = len(match.group("before"))
    after = len(match.group("after"))

    # newlines after the marker are kept by the lookahead
    return "\n" * max(0, min(max(before, after), 2) - after)


def _replace_inline(match: re.Match[str]) -> str:
    text = match.string
    left = text[match.start() - 1] if match.start() > 0 else "\n"
    right = text[match.end()] if match.end() < len(text) else "\n"

    # keep words on either side apart
    return " " if left != "\n" and right != "\n" else ""
