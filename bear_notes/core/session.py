"""
Interface to Bear using its x-callback-url scheme.

Bear's actions are invoked by opening a URL like
`bear://x-callback-url/open-note?id=...`; results are reported back to a
callback URL. The `xcall` helper bridges this to a synchronous process: it
opens the URL, waits for the callback and prints its parameters as JSON on
stdout (success) or stderr (failure).
"""
from __future__ import annotations

import json
import logging
import re
import shutil
import subprocess
from logging import Logger
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import quote, urlencode

from .exceptions import BearCallError, NotFoundError
from .models import NoteContents, NoteInfo, SearchResults
from .store import Mode, NoteStore

__all__ = [
    "Session",
    "build_url",
]

BASE_URL = "bear://x-callback-url"

XCALL_APP_PATH = Path("/Applications/xcall.app/Contents/MacOS/xcall")
"""
Default location of xcall when installed as an app bundle.
"""

_NOT_FOUND_RE = re.compile(r"not (?:be )?found", re.IGNORECASE)


class Session(NoteStore):
    """
    Context in which to invoke Bear actions.

    Implements {obj}`NoteStore` so it can be passed directly to the
    reconciliation policy:

    ```
    session = Session(token="...")
    result = reconcile(body, session, flags=FooterFlags(add_id=True))
    ```
    """

    _xcall: str
    """
    Path to xcall executable.
    """

    _token: str | None
    """
    Bear API token, required by actions which return note lists.
    """

    _show_window: bool
    """
    Whether Bear's window should be shown for each call.
    """

    _logger: Logger

    def __init__(
        self,
        *,
        xcall: str | Path | None = None,
        token: str | None = None,
        show_window: bool = False,
        logger: Logger | None = None,
    ):
        self._xcall = str(xcall) if xcall else _find_xcall()
        self._token = token
        self._show_window = show_window
        self._logger = logger or logging.getLogger()

    @property
    def xcall(self) -> str:
        return self._xcall

    @property
    def token(self) -> str | None:
        return self._token

    def call(
        self, action: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Invoke action and return the parameters Bear passed to the success
        callback.
        """
        url = build_url(action, params)
        cmd = [self._xcall, "-url", url, "-activateApp", "NO"]

        self._logger.debug(f"Invoking Bear action '{action}'")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise BearCallError(
                action, f"could not run xcall '{self._xcall}': {e}"
            )

        if result.returncode != 0:
            raise self._get_error(action, params, result.stderr or result.stdout)

        output = result.stdout.strip()
        if not output:
            return {}

        try:
            response = json.loads(output)
        except json.JSONDecodeError as e:
            raise BearCallError(action, f"invalid response '{output}': {e}")

        if not isinstance(response, dict):
            raise BearCallError(action, f"unexpected response '{output}'")

        return response

    def create(
        self,
        text: str,
        *,
        title: str | None = None,
        tags: list[str] | None = None,
        pin: bool = False,
        timestamp: bool = False,
        open_note: bool = False,
        **extra: Any,
    ) -> NoteInfo:
        """
        Create note and return its identifier and title.
        """
        response = self.call(
            "create",
            {
                "text": text,
                "title": title,
                "tags": tags or None,
                "pin": pin,
                "timestamp": timestamp,
                "open_note": open_note,
                "show_window": self._show_window,
                **extra,
            },
        )
        return NoteInfo.model_validate(response)

    def add_text(
        self,
        text: str,
        *,
        note_id: str | None = None,
        title: str | None = None,
        mode: Mode = Mode.APPEND,
        header: str | None = None,
        new_line: bool = False,
        tags: list[str] | None = None,
        exclude_trashed: bool = False,
        timestamp: bool = False,
        open_note: bool = False,
        **extra: Any,
    ) -> NoteContents:
        """
        Add text to note identified by id or title.
        """
        assert note_id or title

        response = self.call(
            "add-text",
            {
                "id": note_id,
                "title": title,
                "text": text,
                "mode": str(mode),
                "header": header,
                "new_line": new_line,
                "tags": tags or None,
                "exclude_trashed": exclude_trashed,
                "timestamp": timestamp,
                "open_note": open_note,
                "show_window": self._show_window,
                **extra,
            },
        )
        contents = NoteContents.model_validate(response)

        if contents.identifier is None:
            contents.identifier = note_id

        return contents

    def open_note(
        self,
        *,
        note_id: str | None = None,
        title: str | None = None,
        exclude_trashed: bool = False,
    ) -> NoteContents:
        """
        Get note contents by id or title without showing it.
        """
        assert note_id or title

        response = self.call(
            "open-note",
            {
                "id": note_id,
                "title": title,
                "exclude_trashed": exclude_trashed,
                "open_note": False,
                "show_window": self._show_window,
                "token": self._token,
            },
        )
        return NoteContents.model_validate(response)

    def search(
        self, term: str | None = None, *, tag: str | None = None
    ) -> list[NoteInfo]:
        """
        Search notes by term and/or tag.
        """
        response = self.call(
            "search",
            {
                "term": term,
                "tag": tag,
                "show_window": self._show_window,
                "token": self._require_token("search"),
            },
        )
        return SearchResults.model_validate(response).notes

    def today(self, search: str | None = None) -> list[NoteInfo]:
        """
        Get notes created or modified today.
        """
        response = self.call(
            "today",
            {
                "search": search,
                "show_window": self._show_window,
                "token": self._require_token("today"),
            },
        )
        return SearchResults.model_validate(response).notes

    def exists(self, note_id: str) -> bool:
        try:
            self.open_note(note_id=note_id)
        except NotFoundError:
            return False
        return True

    def apply(
        self,
        note_id: str | None,
        text: str,
        *,
        mode: Mode = Mode.REPLACE_ALL,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        if note_id is None:
            return self.create(text, **(params or {})).identifier

        contents = self.add_text(text, note_id=note_id, mode=mode, **(params or {}))
        return contents.identifier or note_id

    def _require_token(self, action: str) -> str:
        if not self._token:
            raise BearCallError(
                action, "API token required (Bear > Help > API Token)"
            )
        return self._token

    def _get_error(
        self, action: str, params: Mapping[str, Any] | None, output: str
    ) -> Exception:
        """
        Map error reported by xcall to an exception.
        """
        message = output.strip()
        code: int | None = None

        try:
            error = json.loads(message)
        except json.JSONDecodeError:
            error = None

        if isinstance(error, dict):
            message = str(error.get("errorMessage", message))
            try:
                code = int(error["errorCode"])
            except (KeyError, TypeError, ValueError):
                code = None

        if _NOT_FOUND_RE.search(message):
            note_id = (params or {}).get("id")
            return NotFoundError(note_id, f"Bear could not find note: {message}")

        return BearCallError(action, message or "unknown error", code)


def build_url(action: str, params: Mapping[str, Any] | None = None) -> str:
    """
    Build x-callback-url for action. Parameters with value `None` are
    omitted, booleans are encoded as `yes`/`no` and lists are joined by
    commas.
    """
    query: dict[str, str] = {}

    for name, value in (params or {}).items():
        if value is None:
            continue

        if isinstance(value, bool):
            value = "yes" if value else "no"
        elif isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)

        query[name.replace("-", "_")] = str(value)

    url = f"{BASE_URL}/{action}"
    return f"{url}?{urlencode(query, quote_via=quote)}" if query else url


def _find_xcall() -> str:
    """
    Locate xcall, preferring the app bundle.
    """
    if XCALL_APP_PATH.is_file():
        return str(XCALL_APP_PATH)
    return shutil.which("xcall") or "xcall"
