"""
Models of responses returned by Bear's x-callback-url actions.
"""
from __future__ import annotations

import json
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "NoteInfo",
    "NoteContents",
    "SearchResults",
]


class BaseResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NoteInfo(BaseResponse):
    """
    Note as returned by `create` and listed by `search`/`today`.
    """

    identifier: str
    title: str = ""
    tags: list[str] = Field(default_factory=list)
    creation_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("creation_date", "creationDate"),
    )
    modification_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "modification_date", "modificationDate"
        ),
    )

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, value: Any) -> Any:
        # tags are sent as a json-encoded list
        if isinstance(value, str):
            return json.loads(value) if value else []
        return value


class NoteContents(BaseResponse):
    """
    Note text and metadata as returned by `open-note` and `add-text`.
    """

    note: str = ""
    identifier: str | None = None
    title: str = ""
    is_trashed: bool = False
    creation_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("creation_date", "creationDate"),
    )
    modification_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "modification_date", "modificationDate"
        ),
    )

    @field_validator("is_trashed", mode="before")
    @classmethod
    def parse_is_trashed(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower() in ("yes", "true", "1")
        return value


class SearchResults(BaseResponse):
    """
    Result of `search` and `today`.
    """

    notes: list[NoteInfo] = Field(default_factory=list)

    @field_validator("notes", mode="before")
    @classmethod
    def parse_notes(cls, value: Any) -> Any:
        # bear returns the list as a json string
        if isinstance(value, str):
            return json.loads(value) if value else []
        return value
