"""
Rendering of the metadata footer appended to note bodies:

```
<body>

---
*Created: Mon, Jan 6, 2025, 03:04 PM GMT+2*
*Last Updated: Mon, Jan 6, 2025, 03:04 PM GMT+2*
<!-- Note ID: ABC-123 -->
```
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass

from .marker import render

__all__ = [
    "FOOTER_SEPARATOR",
    "FooterFlags",
    "build_creation_footer",
    "build_update_footer",
    "format_gmt_offset",
    "format_timestamp",
]

FOOTER_SEPARATOR = "\n\n---"
"""
Blank line followed by horizontal rule, separating footer from content.
"""

CREATED_PREFIX = "*Created: "
UPDATED_PREFIX = "*Last Updated: "

# locale-independent names
_WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_MONTHS = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]


@dataclass(frozen=True, kw_only=True)
class FooterFlags:
    """
    Selects which footer lines get rendered.
    """

    creation_date: bool = False
    """
    Render Created (and for updates, Last Updated) lines.
    """

    add_id: bool = False
    """
    Render identity marker.
    """

    @property
    def enabled(self) -> bool:
        """
        Whether any footer content is requested.
        """
        return self.creation_date or self.add_id


def format_timestamp(dt: datetime.datetime) -> str:
    """
    Format datetime like `Mon, Jan 6, 2025, 03:04 PM GMT+2`.
    """
    dt = _localize(dt)

    hour = dt.hour % 12 or 12
    am_pm = "AM" if dt.hour < 12 else "PM"

    return (
        f"{_WEEKDAYS[dt.weekday()]}, {_MONTHS[dt.month - 1]} {dt.day}, "
        f"{dt.year}, {hour:02}:{dt.minute:02} {am_pm} {format_gmt_offset(dt)}"
    )


def format_gmt_offset(dt: datetime.datetime) -> str:
    """
    Get UTC offset of datetime as `GMT+2`, or `GMT+5:30` if not a whole
    number of hours.
    """
    offset = _localize(dt).utcoffset()
    assert offset is not None

    offset_minutes = int(offset.total_seconds()) // 60
    sign = "+" if offset_minutes >= 0 else "-"
    hours, minutes = divmod(abs(offset_minutes), 60)

    if minutes:
        return f"GMT{sign}{hours}:{minutes:02}"
    return f"GMT{sign}{hours}"


def build_creation_footer(
    note_id: str | None,
    *,
    include_created: bool,
    include_id: bool,
    now: datetime.datetime,
) -> str:
    """
    Build footer for a new note: Created line only, since the note has no
    history yet.

    Returns an empty string if nothing is included.
    """
    lines: list[str] = []

    if include_created:
        lines.append(f"{CREATED_PREFIX}{format_timestamp(now)}*")

    return _assemble(lines, note_id, include_id)


def build_update_footer(
    note_id: str | None,
    *,
    include_created: bool,
    include_id: bool,
    now: datetime.datetime,
) -> str:
    """
    Build footer for an existing note. Both Created and Last Updated are
    stamped with `now`; the original creation time is not tracked.

    Returns an empty string if nothing is included.
    """
    lines: list[str] = []

    if include_created:
        timestamp = format_timestamp(now)
        lines.append(f"{CREATED_PREFIX}{timestamp}*")
        lines.append(f"{UPDATED_PREFIX}{timestamp}*")

    return _assemble(lines, note_id, include_id)


def _assemble(lines: list[str], note_id: str | None, include_id: bool) -> str:
    if include_id:
        # render() rejects a missing id
        lines.append(render(note_id or ""))

    if not lines:
        return ""

    return FOOTER_SEPARATOR + "".join(f"\n{line}" for line in lines)


def _localize(dt: datetime.datetime) -> datetime.datetime:
    """
    Interpret naive datetimes as local time.
    """
    return dt if dt.tzinfo is not None else dt.astimezone()
