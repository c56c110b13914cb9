"""
Reading, writing and finding note files.
"""
from __future__ import annotations

import os
from pathlib import Path

from ...core.exceptions import NoteIOError

__all__ = [
    "find_note_files",
    "read_note_file",
    "resolve_path",
    "write_note_file",
]


def resolve_path(raw_path: str | Path, cwd: Path | None = None) -> Path:
    """
    Expand leading `~` and make path absolute relative to working directory.
    """
    path = Path(raw_path).expanduser()

    if not path.is_absolute():
        path = (cwd or Path(os.getcwd())) / path

    return path


def read_note_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise NoteIOError(path, "file not found")
    except (OSError, UnicodeDecodeError) as e:
        raise NoteIOError(path, str(e))


def write_note_file(path: Path, body: str):
    try:
        path.write_text(body, encoding="utf-8")
    except (OSError, UnicodeEncodeError) as e:
        raise NoteIOError(path, str(e))


def find_note_files(
    directory: Path, *, pattern: str = "*.md", recursive: bool = False
) -> list[Path]:
    """
    Get files in directory matching glob pattern, sorted by path. When
    recursing, hidden folders are skipped.
    """
    assert directory.is_dir()

    files: list[Path] = []

    for path in directory.iterdir():
        if path.is_dir():
            if recursive and not path.name.startswith("."):
                files += find_note_files(path, pattern=pattern, recursive=True)
        elif path.is_file() and path.match(pattern):
            files.append(path)

    return sorted(files)
